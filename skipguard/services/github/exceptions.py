"""GitHub-related exception types."""

from skipguard.core.exceptions import SkipguardError


class GithubError(SkipguardError):
    """Base exception for GitHub API failures."""


class GithubConfigurationError(GithubError):
    """Raised when required configuration is missing."""


class GithubApiError(GithubError):
    """Raised when GitHub answers with an error status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GithubRateLimitError(GithubApiError):
    """Raised when the upstream service enforces a rate limit."""

    def __init__(self, message: str, retry_after: int | float | None = None):
        super().__init__(message, status_code=403)
        self.retry_after = retry_after


class GithubRetryableError(GithubError):
    """Raised for transient issues where retrying later may succeed."""
