"""Status backend port: one way of persisting an order status change.

Two implementations exist: the command pipeline (which also notifies the
customer) and a direct repository write used as the single fallback.
"""

from abc import ABC, abstractmethod


class StatusBackendError(Exception):
    """A backend could not apply the status change."""

    def __init__(self, backend: str, reason: str) -> None:
        self.backend = backend
        self.reason = reason
        super().__init__(f"{backend}: {reason}")


class StatusBackend(ABC):
    """Abstract interface for status backends."""

    name: str = "backend"

    @abstractmethod
    def apply(self, order_id: str, status: str) -> None:
        """Persist the status change or raise StatusBackendError.

        Validation errors are not wrapped; they describe the request, not the
        backend, and must not trigger a fallback.
        """
        ...
