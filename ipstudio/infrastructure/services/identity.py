"""Wallet identity resolution.

Stacks addresses are case-insensitive base32 strings; they are canonicalised
to upper case. In strict mode anything else is treated as unverified.
"""

import re

from attrs import define

from ipstudio.config import get_logger

logger = get_logger(__name__)

STACKS_ADDRESS = re.compile(r"^S[PTMN][0-9A-HJKMNP-TV-Z]{37,40}$", re.IGNORECASE)


@define(slots=True)
class WalletIdentityResolver:
    """Map an authenticated identity to its canonical wallet address."""

    strict: bool = False

    async def resolve(self, identity: str | None) -> str | None:
        if identity is None or not identity.strip():
            return None

        candidate = identity.strip()
        if STACKS_ADDRESS.match(candidate):
            return candidate.upper()
        if self.strict:
            logger.warning(f"Rejected unverified identity '{candidate}'")
            return None
        return candidate
