from typing import Optional, Dict, Any


class NewsServiceError(Exception):
    status_code = 500

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ProviderError(NewsServiceError):
    """A single provider failed; recovered by the aggregator, never surfaced to clients."""
    status_code = 503

    def __init__(self, provider: str, code: str, message: str):
        super().__init__(
            message=message,
            error_code=code,
            details={"provider": provider}
        )
        self.provider = provider
        self.code = code

    def __str__(self) -> str:
        return f"[{self.provider}] {self.code}: {self.message}"


class ValidationError(NewsServiceError):
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, error_code="INVALID_PARAMETERS", details=details)


class PersistenceError(NewsServiceError):
    status_code = 503

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, error_code="PERSISTENCE_ERROR", details=details)


class NotFoundError(NewsServiceError):
    status_code = 404


class ProviderNotFoundError(NotFoundError):
    def __init__(self, name: str):
        super().__init__(
            message=f"Provider {name} not found",
            error_code="PROVIDER_NOT_FOUND",
            details={"provider": name}
        )
