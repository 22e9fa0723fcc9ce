"""
Platform-wide exception hierarchy.

Usage:
    from venue_desk.core.exceptions import ConfigurationError

    raise ConfigurationError("Missing environment", missing=["SUPABASE_URL"])
"""


class ConfigurationError(Exception):
    """Raised when the application configuration is invalid or incomplete.

    Raised at startup only (app factory, startup diagnostics), never while
    serving a request.

    Args:
        message: Human-readable explanation of what is wrong.
        missing: Optional names of settings / environment variables that
                 were required but absent. Included in logs.
    """

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        self.missing = list(missing or [])
        if self.missing:
            message = f"{message}: {', '.join(self.missing)}"
        super().__init__(message)
