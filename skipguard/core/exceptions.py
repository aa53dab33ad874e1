"""Exception types raised by skipguard."""


class SkipguardError(Exception):
    """Base exception for skip-decision failures."""


class ConfigurationError(SkipguardError):
    """Raised when an action input or runner variable is missing or malformed."""


class RunParseError(SkipguardError):
    """Raised when a workflow run payload lacks the fields needed for comparison."""
