"""Error kinds raised by the generation pipeline."""

RATE_LIMIT_MARKERS = ("429", "quota")


class StudioError(Exception):
    """Base exception for generation failures."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidOutputError(StudioError):
    """The model answered without any SVG markup."""


class SegmentationError(StudioError):
    """The script breakdown response could not be parsed."""


def is_rate_limit(exc: BaseException) -> bool:
    """True for quota / HTTP 429 failures, which are worth retrying.

    google-genai raises ``errors.APIError`` subclasses carrying ``code`` and
    ``status``; anything else is judged by its message.
    """
    if getattr(exc, "code", None) == 429 or getattr(exc, "status", None) in (
        429,
        "RESOURCE_EXHAUSTED",
    ):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in RATE_LIMIT_MARKERS)
