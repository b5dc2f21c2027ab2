"""Error taxonomy for the authoring flow.

Every error carries a message that is safe to show to the creator.
"""


class StudioError(Exception):
    """Base exception for authoring flow errors."""

    @property
    def user_message(self) -> str:
        """Message suitable for display to the creator."""
        return str(self)


class ValidationError(StudioError):
    """Raised when a draft fails validation. Always recoverable.

    Holds the full list of problems so they can be surfaced together.
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Validation failed")


class UploadError(StudioError):
    """Raised when a single file fails to reach object storage."""

    def __init__(self, file_name: str, reason: str):
        self.file_name = file_name
        self.reason = reason
        super().__init__(f"Failed to upload {file_name}: {reason}")


class PersistenceError(StudioError):
    """Raised when the final write to the submission store fails."""


class AuthenticationError(StudioError):
    """Raised when no verified identity is available for the authoring flow."""


class SubmissionInProgressError(StudioError):
    """Raised when a submission is attempted while another is in flight."""


def describe_error(error: BaseException | object) -> str:
    """Map any collaborator error to a user-visible string.

    Structured errors keep their message, unknown ones are stringified.
    """
    match error:
        case StudioError() as e:
            return e.user_message
        case BaseException() as e if str(e):
            return str(e)
        case BaseException() as e:
            return type(e).__name__
        case None:
            return "Unknown error"
        case _:
            return str(error)
