class HarnessError(Exception):
    """base class for errors raised by harness services."""


class ConfigurationError(HarnessError):
    """unknown tenant or a credential that was never configured."""


class StoreWriteError(HarnessError):
    """the event store could not persist a notification."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class UpstreamTransportError(HarnessError):
    """network-level failure talking to the payment provider."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"request to {url} failed: {cause}")
        self.url = url
        self.cause = cause
