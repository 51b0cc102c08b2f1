"""
Error categorization for registry failures.

Registry calls are never retried: a rejected call has already been rolled
back and the caller must correct its input. This service only decides how
a failure is logged and how it is reported over HTTP.
"""

from typing import Any, Dict

import structlog

from totems.utils.exceptions import ErrorCategory, TotemsException

HTTP_STATUS_BY_CATEGORY = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.AUTHORIZATION: 403,
    ErrorCategory.ACCOUNTING: 422,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.CAPABILITY: 422,
    ErrorCategory.STATE: 409,
}

CONFLICT_CODES = {"TotemAlreadyExists", "RelayAlreadyExists"}


class ErrorHandler:
    """Classify and log registry errors"""

    def __init__(self):
        self.logger = structlog.get_logger()

    def categorize(self, error: Exception) -> ErrorCategory:
        if isinstance(error, TotemsException):
            return error.category
        return None

    def http_status(self, error: Exception) -> int:
        """
        Map an error to the HTTP status the read API answers with.

        Args:
            error: The exception that occurred

        Returns:
            The status code, 500 for anything that is not a registry error
        """
        if not isinstance(error, TotemsException):
            return 500
        if error.error_code in CONFLICT_CODES:
            return 409
        return HTTP_STATUS_BY_CATEGORY.get(error.category, 400)

    def handle_registry_error(self, error: Exception, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Log a failed registry call.

        Args:
            error: The exception that occurred
            context: Additional context about the call

        Returns:
            The error body reported to the caller
        """
        category = self.categorize(error)
        if category is None:
            self.logger.error("Unexpected registry error", error=str(error), context=context)
            return {"error_code": "InternalError", "message": "Internal server error"}

        log_method = self.logger.info if category == ErrorCategory.NOT_FOUND else self.logger.warning
        log_method(
            "Registry call rejected",
            category=category.value,
            error_code=error.error_code,
            error=error.message,
            context=context,
        )
        return error.to_dict()
