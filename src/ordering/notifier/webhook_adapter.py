"""Webhook notifier: POSTs status changes to the configured endpoint."""

import httpx
import structlog

from ordering.notifier.port import NotificationError, OrderNotifier, StatusChangeNotice

logger = structlog.get_logger(__name__)


class WebhookNotifier(OrderNotifier):
    """Sends ``{"event": "order.status_changed", ...}`` as JSON."""

    def __init__(self, url: str, timeout: float = 5.0, client: httpx.Client | None = None) -> None:
        self.url = url
        self.timeout = timeout
        self._client = client

    def order_status_changed(self, notice: StatusChangeNotice) -> None:
        payload = {"event": "order.status_changed", **notice.as_payload()}
        client = self._client or httpx.Client(timeout=self.timeout)
        try:
            response = client.post(self.url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning(
                "Order status webhook failed",
                order_id=notice.order_id,
                status=notice.status,
                error=str(exc),
            )
            raise NotificationError(f"Webhook delivery failed: {exc}") from exc
        finally:
            if self._client is None:
                client.close()

        logger.info(
            "Order status webhook delivered",
            order_id=notice.order_id,
            status=notice.status,
            response_status=response.status_code,
        )
