"""Direct status backend: writes the status straight through the repository.

Skips the customer notification. Used only when the primary pipeline fails.
"""

from protean import UnitOfWork
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ordering.backend.port import StatusBackend, StatusBackendError
from ordering.order.order import Order


class DirectStatusBackend(StatusBackend):
    name = "direct"

    def apply(self, order_id: str, status: str) -> None:
        try:
            with UnitOfWork():
                repo = current_domain.repository_for(Order)
                order = repo.get(order_id)
                if order.change_status(status):
                    repo.add(order)
        except (ValidationError, ObjectNotFoundError):
            raise
        except Exception as exc:  # noqa: BLE001
            raise StatusBackendError(self.name, f"{type(exc).__name__}: {exc}") from exc
