"""Exception hierarchy shared by the forecasting services."""


class SalescastError(Exception):
    pass


class PeriodParseError(SalescastError, ValueError):
    """A period label could not be parsed under its granularity's format.

    Raised instead of guessing a base date, since a malformed trailing
    label means the upstream series is corrupt.
    """

    def __init__(self, label: str, granularity: str):
        super().__init__(f"cannot parse period {label!r} as a {granularity} label")
        self.label = label
        self.granularity = granularity


class ForecastProviderError(SalescastError):
    """Base for failures talking to the external forecast provider."""


class CredentialError(ForecastProviderError):
    pass


class TransportError(ForecastProviderError):
    pass


class ProviderError(ForecastProviderError):
    kind = "error"

    def __init__(self, status: int | None, detail: str = ""):
        super().__init__(detail or f"provider returned status {status}")
        self.status = status


class ProviderAuthError(ProviderError):
    kind = "authentication_failed"


class ProviderNotFoundError(ProviderError):
    kind = "endpoint_not_found"


class ProviderRateLimitError(ProviderError):
    kind = "rate_limited"


class ProviderServerError(ProviderError):
    kind = "server_error"


_STATUS_ERRORS: dict[int, type[ProviderError]] = {
    401: ProviderAuthError,
    404: ProviderNotFoundError,
    429: ProviderRateLimitError,
    500: ProviderServerError,
}


def provider_error_for(status: int, detail: str = "") -> ProviderError:
    return _STATUS_ERRORS.get(status, ProviderError)(status, detail)


class ResponseParseError(SalescastError):
    pass


class NoArrayFoundError(ResponseParseError):
    pass
