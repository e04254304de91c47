class QuoteProviderError(RuntimeError):
    """Base exception for a single upstream provider call."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ProviderUnavailableError(QuoteProviderError):
    """Raised on non-success HTTP status or transport failure."""

    def __init__(self, provider: str, message: str, status_code: int | None = None) -> None:
        super().__init__(provider, message)
        self.status_code = status_code


class ProviderShapeError(QuoteProviderError):
    """Raised when a response cannot be parsed into the expected shape."""


class ProviderNoPriceError(QuoteProviderError):
    """Raised when a response parses but carries no finite price."""
