"""Order status update with a single fallback.

``update_order_status`` is the one entry point the API uses to move an order:

1. Load the order. Asking for the status it already has is a no-op.
2. Check the transition. An illegal transition is a validation error and is
   never retried.
3. Try the primary backend (the ChangeOrderStatus command pipeline).
4. Only if that fails, try the direct backend once.
5. Re-read the order and report which path applied the change.
6. After a primary write has committed, notify the customer. A failed
   notification is reported on the result; the saved status stands.

If both backends fail, StatusUpdateError carries both reasons.
"""

from dataclasses import dataclass, field
from enum import Enum

import structlog
from protean.utils.globals import current_domain
from shared.errors import UpstreamFailure

from ordering.backend import StatusBackend, StatusBackendError, get_backends
from ordering.notifier import NotificationError, get_notifier
from ordering.order.order import Order
from ordering.order.status import status_change_notice
from ordering.order.workflow import coerce_status

logger = structlog.get_logger(__name__)


class StatusUpdatePath(Enum):
    PRIMARY = "primary"
    DIRECT = "direct"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class StatusUpdateResult:
    path: StatusUpdatePath
    order: Order
    failures: tuple = field(default_factory=tuple)
    notification_error: str | None = None

    @property
    def used_fallback(self) -> bool:
        return self.path is StatusUpdatePath.DIRECT


class StatusUpdateError(UpstreamFailure):
    """Both status backends failed."""

    def __init__(self, order_id: str, status: str, failures: list[StatusBackendError]) -> None:
        self.order_id = order_id
        self.status = status
        self.failures = tuple(failures)
        reasons = "; ".join(str(failure) for failure in self.failures)
        super().__init__(f"Could not set order {order_id} to {status}. {reasons}")

    def failure_details(self) -> list[dict]:
        return [{"backend": failure.backend, "reason": failure.reason} for failure in self.failures]


def update_order_status(
    order_id: str,
    status: str,
    primary: StatusBackend | None = None,
    direct: StatusBackend | None = None,
) -> StatusUpdateResult:
    repo = current_domain.repository_for(Order)
    order = repo.get(order_id)
    target = coerce_status(status)

    if order.status == target.value:
        return StatusUpdateResult(path=StatusUpdatePath.UNCHANGED, order=order)

    order.assert_can_transition(target)
    previous_status = order.status

    default_primary, default_direct = get_backends()
    attempts = (
        (StatusUpdatePath.PRIMARY, primary or default_primary),
        (StatusUpdatePath.DIRECT, direct or default_direct),
    )

    failures: list[StatusBackendError] = []
    for path, backend in attempts:
        try:
            backend.apply(str(order.id), target.value)
        except StatusBackendError as exc:
            logger.warning(
                "Status backend failed",
                order_id=str(order.id),
                status=target.value,
                backend=exc.backend,
                reason=exc.reason,
            )
            failures.append(exc)
            continue

        logger.info(
            "Order status updated",
            order_id=str(order.id),
            status=target.value,
            path=path.value,
        )
        updated = repo.get(str(order.id))
        notification_error = None
        if path is StatusUpdatePath.PRIMARY:
            notification_error = _notify(updated, previous_status)
        return StatusUpdateResult(
            path=path,
            order=updated,
            failures=tuple(failures),
            notification_error=notification_error,
        )

    logger.error("Order status update failed on every backend", order_id=str(order.id), status=target.value)
    raise StatusUpdateError(str(order.id), target.value, failures)


def _notify(order: Order, previous_status: str) -> str | None:
    try:
        get_notifier().order_status_changed(status_change_notice(order, previous_status))
    except NotificationError as exc:
        logger.warning("Customer notification failed", order_id=str(order.id), status=order.status, reason=str(exc))
        return str(exc)
    return None
