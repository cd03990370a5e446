"""Provider error hierarchy."""


class ProviderError(Exception):
    """Raised when an upstream provider returns an unusable response."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UpstreamFetchError(ProviderError):
    """Network or retryable HTTP failure that outlasted the retry budget."""


class InvalidParameterError(ProviderError):
    """Provider rejected a request parameter, even after stripping it once."""

    def __init__(self, message: str, parameter: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.parameter = parameter


class DataUnavailable(ProviderError):
    """Provider answered but had no data for the request."""


class MissingApiKeyError(ProviderError):
    """Provider credentials are not configured."""
