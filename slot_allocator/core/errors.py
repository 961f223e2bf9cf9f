"""
Core Errors Module

Standardized error classes for the slot allocator.
Provides conversion between internal errors and HTTP responses.

The scoring engine itself never raises: out-of-range weights are clamped,
exhausted slots resolve to None. These errors are raised at the session
boundary (unknown identifiers) and by the simulation driver (illegal
run-state transitions).

Usage:
    from slot_allocator.core.errors import NotFoundError, to_http_exception

    raise NotFoundError("Unknown slot", details={"slot_id": "9-70"})
"""

import logging
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


# ==================== Base Error Class ====================

class AppError(Exception):
    """
    Base application error class.

    Attributes:
        code: Error code (e.g., "validation_error", "not_found")
        message: Human-readable error message
        details: Optional additional error context
        status_code: HTTP status code for this error type
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._default_code()
        self.details = details or {}
        self.status_code = status_code

    def _default_code(self) -> str:
        """
        Generate default error code from class name.

        Returns:
            snake_case version of class name without the Error suffix
        """
        name = self.__class__.__name__
        if name.endswith("Error"):
            name = name[:-5]

        result = []
        for i, char in enumerate(name):
            if char.isupper() and i > 0:
                result.append("_")
            result.append(char.lower())

        return "".join(result)

    def to_dict(self, run_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Convert error to dictionary for JSON responses.

        Args:
            run_id: Optional simulation run ID

        Returns:
            Error dict with code, message, details, run_id
        """
        result = {
            "code": self.code,
            "message": self.message,
        }

        if self.details:
            result["details"] = self.details

        if run_id:
            result["run_id"] = run_id

        return result


# ==================== Specific Error Classes ====================

class ValidationError(AppError):
    """
    Validation error (400 Bad Request).

    Raised when a request is structurally valid but semantically unusable,
    e.g. a weights update naming neither or both weights.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="validation_error",
            details=details,
            status_code=400
        )


class NotFoundError(AppError):
    """
    Not found error (404 Not Found).

    Raised when a provider or slot identifier is not part of the session.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="not_found",
            details=details,
            status_code=404
        )


class SimulationStateError(AppError):
    """
    Simulation state error (409 Conflict).

    Raised when a driver command is not valid in the current run state,
    e.g. pausing an idle simulation.
    """

    def __init__(
        self,
        message: str = "Command not allowed in current simulation state",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="simulation_state",
            details=details,
            status_code=409
        )


# ==================== Helper Functions ====================

def to_http_exception(error: AppError, run_id: Optional[str] = None):
    """
    Convert AppError to FastAPI HTTPException.

    Args:
        error: AppError to convert
        run_id: Simulation run ID to attach. Request handlers pass the
            driver's run id, since the run context var is only set inside
            the run's own tasks.

    Returns:
        HTTPException instance

    Example:
        >>> from slot_allocator.core.errors import NotFoundError, to_http_exception
        >>> http_exc = to_http_exception(NotFoundError("Unknown provider"))
        >>> http_exc.status_code
        404
    """
    from fastapi import HTTPException
    from slot_allocator.core.logging import get_run_id

    if run_id is None:
        run_id = get_run_id()
        if run_id == "-":
            run_id = None

    if error.status_code >= 500:
        logger.error(f"Internal error ({error.code}): {error.message}")

    return HTTPException(
        status_code=error.status_code,
        detail=error.to_dict(run_id=run_id)
    )
