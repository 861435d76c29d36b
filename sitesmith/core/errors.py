"""Error taxonomy shared by every generation stage."""


class SitesmithError(Exception):
    """Base class; ``status_code`` is what the HTTP layer answers with."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SitesmithError):
    """Required caller input is missing or unusable."""
    status_code = 400


class NotFoundError(SitesmithError):
    status_code = 404


class ConfigurationError(SitesmithError):
    """No usable provider, model or credential could be resolved."""


class ProviderError(SitesmithError):
    """The AI backend failed (network, auth, quota). Keeps the SDK message."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider} generation failed: {message}")
        self.provider = provider


class MalformedResponseError(SitesmithError):
    """The model returned output that could not be parsed into the expected shape."""


class StorageError(SitesmithError):
    """A file the stage depends on could not be read from the file sink."""
