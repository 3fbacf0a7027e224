"""Custom exception hierarchy for showrec.

All application exceptions inherit from :class:`ShowRecError`, which
carries an optional ``provider_name`` naming the collaborator that failed
(e.g. "http_genre", "learned_mlp", "sqlite_store").

    ShowRecError  (base)
    +-- ProviderUnavailableError  (genre / embedding backend unreachable)
    +-- ModelTrainingError        (learned scorer could not be fitted)
    +-- PersistenceError          (recommendation store read/write)
    +-- ConfigurationError        (invalid settings at startup)

None of these are allowed to escape to the host application from the
recommendation flow: every failure degrades to a zero score component,
the previous model, or "no cached data".
"""


class ShowRecError(Exception):
    """Base exception for all showrec errors.

    ``__str__`` prefixes the provider name in brackets for log scanning,
    e.g. ``[http_genre] Artist genre lookup failed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


class ProviderUnavailableError(ShowRecError):
    """Raised when the genre or description-embedding backend fails.

    The recommendation service catches this and scores the affected
    component as 0 for the current pass.
    """

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ModelTrainingError(ShowRecError):
    """Raised when fitting the learned scorer fails; prior weights are kept."""

    def __init__(
        self,
        message: str = "Model training failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class PersistenceError(ShowRecError):
    """Raised when the recommendation store cannot read or write."""

    def __init__(
        self,
        message: str = "Recommendation persistence failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(ShowRecError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
