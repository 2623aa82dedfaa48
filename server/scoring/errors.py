"""
Fatal scan errors.

Anything raised from here aborts the scan; recoverable conditions (a single file
failing to download, the narrative call failing) are absorbed where they happen.
"""

RATE_LIMIT_MESSAGE = (
    "API rate limit exceeded. Please wait a minute and try again, "
    "or try a smaller repository."
)

RATE_LIMIT_INDICATORS = ("429", "quota", "too many requests", "rate limit")


class ScanError(Exception):
    """Base class for errors that abort a scan."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRepoUrlError(ScanError):
    status_code = 400


class RepoNotFoundError(ScanError):
    status_code = 404


class RepoFetchError(ScanError):
    status_code = 502


class RateLimitError(ScanError):
    status_code = 429

    def __init__(self, message: str = RATE_LIMIT_MESSAGE):
        super().__init__(message)


def looks_rate_limited(text: str) -> bool:
    """Check free-form failure text for rate-limit wording."""
    lowered = text.lower()
    return any(indicator in lowered for indicator in RATE_LIMIT_INDICATORS)
