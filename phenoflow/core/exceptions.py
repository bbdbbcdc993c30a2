"""Error kinds raised by the phenotype service.

Every component raises one of these immediately; nothing retries. At the
HTTP boundary all of them collapse into a single generic 500 response, so
the kinds exist for logging and for tests.

    PhenoflowError
        ├── NotFoundError           repository, file, step or author match absent
        ├── ConflictError           stale or missing version token (sha)
        ├── MalformedDocumentError  document does not have the expected shape
        │     └── RegionNotFound    marker pair absent or region out of bounds
        ├── StoreUnavailableError   transport/auth failure against GitHub
        └── AuthorizationError      claimed author did not create the phenotype
"""

from typing import Any, Optional


class PhenoflowError(Exception):
    """Base exception carrying a machine-readable code and debug details."""

    default_code = "PHENOFLOW_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class NotFoundError(PhenoflowError):
    default_code = "NOT_FOUND"


class ConflictError(PhenoflowError):
    default_code = "CONFLICT"


class MalformedDocumentError(PhenoflowError):
    default_code = "MALFORMED_DOCUMENT"


class RegionNotFound(MalformedDocumentError):
    """A delimited region could not be located inside a document."""

    default_code = "REGION_NOT_FOUND"


class StoreUnavailableError(PhenoflowError):
    default_code = "STORE_UNAVAILABLE"


class AuthorizationError(PhenoflowError):
    default_code = "NOT_AUTHOR"
