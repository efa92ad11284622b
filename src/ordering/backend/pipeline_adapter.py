"""Primary status backend: runs ChangeOrderStatus through the domain."""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ordering.backend.port import StatusBackend, StatusBackendError
from ordering.order.status import ChangeOrderStatus


class PipelineStatusBackend(StatusBackend):
    name = "primary"

    def apply(self, order_id: str, status: str) -> None:
        try:
            current_domain.process(ChangeOrderStatus(order_id=order_id, status=status), asynchronous=False)
        except (ValidationError, ObjectNotFoundError):
            raise
        except Exception as exc:  # noqa: BLE001
            raise StatusBackendError(self.name, f"{type(exc).__name__}: {exc}") from exc
