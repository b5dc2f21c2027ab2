"""Tempo detection from file names.

Producers usually tag loops like ``dusty_keys_92bpm.wav``; an explicit
``bpm`` suffix is trusted, a bare number in the plausible tempo range is not.
"""

import re

from ipstudio.domain.entities import BpmDetection, MediaFile

EXPLICIT_BPM = re.compile(r"(\d{2,3}(?:\.\d+)?)\s*-?\s*bpm", re.IGNORECASE)
BARE_NUMBER = re.compile(r"(?<![\d.])(\d{2,3})(?![\d.])")

MIN_BPM = 40
MAX_BPM = 250


class FilenameBpmDetector:
    """Reads the tempo a producer wrote into the file name."""

    async def detect(self, file: MediaFile) -> BpmDetection:
        stem = file.name.rsplit(".", 1)[0]

        explicit = EXPLICIT_BPM.search(stem)
        if explicit and MIN_BPM <= float(explicit.group(1)) <= MAX_BPM:
            return BpmDetection(bpm=float(explicit.group(1)), confidence=0.9)

        for match in BARE_NUMBER.finditer(stem):
            value = int(match.group(1))
            if MIN_BPM <= value <= MAX_BPM:
                return BpmDetection(bpm=float(value), confidence=0.3)

        return BpmDetection()
