from contextlib import contextmanager

import structlog

from totems.utils.exceptions import ReentrantCall


class NonReentrantGuard:
    """Entry flag held for the whole of a mutating call, hooks included."""

    def __init__(self):
        self._active_operation = None
        self.logger = structlog.get_logger()

    @property
    def locked(self) -> bool:
        return self._active_operation is not None

    @contextmanager
    def hold(self, operation: str):
        if self._active_operation is not None:
            self.logger.warning(
                "Reentrant call rejected",
                operation=operation,
                active_operation=self._active_operation,
            )
            raise ReentrantCall(operation, self._active_operation)

        self._active_operation = operation
        try:
            yield
        finally:
            self._active_operation = None
