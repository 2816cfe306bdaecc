# ==============================================================================
# DOMAIN ERRORS - Error taxonomy shared by services and routes
# ==============================================================================
# Every failure a service can surface has a stable `kind` and the HTTP status
# the API layer answers with. Routes never build error responses by hand:
# they let these exceptions bubble up to the handler registered in main.py.
# ==============================================================================

from typing import Any, Dict


class ApiError(Exception):
    """Base class for every error the API reports to callers."""

    kind = 'ApiError'
    status_code = 500

    def __init__(self, message: str = ''):
        super().__init__(message)
        self.message = message or self.kind

    def to_dict(self) -> Dict[str, Any]:
        return {'ok': False, 'error': self.message, 'kind': self.kind}


class InvalidArgument(ApiError):
    """Malformed or out-of-range caller input."""
    kind = 'InvalidArgument'
    status_code = 400


class DuplicateIdentity(ApiError):
    """A uniqueness rule (username, category name, product name) was violated."""
    kind = 'DuplicateIdentity'
    status_code = 400


class ReferentialViolation(ApiError):
    """A foreign reference (e.g. categoryId) points to a missing row."""
    kind = 'ReferentialViolation'
    status_code = 400


class InsufficientStock(ApiError):
    kind = 'InsufficientStock'
    status_code = 400


class Unauthenticated(ApiError):
    """Missing, malformed, tampered or expired session token."""
    kind = 'Unauthenticated'
    status_code = 401


class Forbidden(ApiError):
    """Valid token whose role claim does not match the endpoint requirement."""
    kind = 'Forbidden'
    status_code = 403


class NotFound(ApiError):
    kind = 'NotFound'
    status_code = 404


class PersistenceFailure(ApiError):
    """The store rejected a write for reasons opaque to the caller."""
    kind = 'PersistenceFailure'
    status_code = 500


class ConfigError(Exception):
    """Fatal configuration problem detected at startup."""
    pass
