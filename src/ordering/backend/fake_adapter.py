"""Fake status backend: a direct write that can be told to fail."""

from ordering.backend.direct_adapter import DirectStatusBackend
from ordering.backend.port import StatusBackendError


class FakeStatusBackend(DirectStatusBackend):
    """Configurable backend for exercising the fallback path."""

    def __init__(self, name: str = "fake") -> None:
        self.name = name
        self.should_succeed: bool = True
        self.failure_reason: str = "Backend unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Backend unavailable") -> None:
        """Configure backend behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def apply(self, order_id: str, status: str) -> None:
        self.calls.append({"order_id": order_id, "status": status})
        if not self.should_succeed:
            raise StatusBackendError(self.name, self.failure_reason)
        super().apply(order_id, status)
