"""Error taxonomy for the estimation pipeline."""


class EstimationError(Exception):
    """Base class for every pipeline failure."""


class MissingCredentialsError(EstimationError):
    """A required API key was not configured."""

    def __init__(self, service: str) -> None:
        super().__init__(f"{service} API key is missing")
        self.service = service


class UpstreamError(EstimationError):
    """An upstream HTTP service returned a non-2xx response or was unreachable."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        service: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.service = service


class RateLimitedError(UpstreamError):
    """The upstream service answered HTTP 429."""


class InvalidCredentialsError(UpstreamError):
    """The upstream service rejected the configured API key."""


class MalformedResponseError(EstimationError):
    """A response could not be decoded into the expected schema."""


class ImageEncodingError(EstimationError):
    """Image bytes could not be encoded for the wire."""


class NoItemsIdentifiedError(EstimationError):
    """The intent parser found no food items in the description."""

    def __init__(self) -> None:
        super().__init__("No food items were identified in the description")


class AllLookupsFailedError(EstimationError):
    """Every identified item failed nutrient lookup."""

    def __init__(self, failed_terms: tuple[str, ...]) -> None:
        joined = ", ".join(failed_terms)
        super().__init__(f"No nutrition data found for: {joined}")
        self.failed_terms = failed_terms
