"""Detached delivery of order notifications.

Jobs run on a small thread pool, each inside a fresh domain context, so they
outlive the request that submitted them and never report back to it.
"""

from concurrent.futures import Future, ThreadPoolExecutor

import structlog

from caviar.config import get_settings
from caviar.domain import caviar
from caviar.notifications.dispatcher import NotificationDispatcher

logger = structlog.get_logger(__name__)


class BackgroundNotifier:
    def __init__(self, dispatcher: NotificationDispatcher | None = None, max_workers: int | None = None):
        self._dispatcher = dispatcher
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or get_settings().notification_workers,
            thread_name_prefix="notifier",
        )

    @property
    def dispatcher(self) -> NotificationDispatcher:
        if self._dispatcher is None:
            self._dispatcher = NotificationDispatcher()
        return self._dispatcher

    def notify_order_created(self, order) -> Future:
        """Queue the "order created" alert and return immediately."""
        return self._executor.submit(self._run_order_created, order)

    def _run_order_created(self, order):
        with caviar.domain_context():
            try:
                results = self.dispatcher.send_order_created(order)
            except Exception as exc:
                logger.error(
                    "Failed to send order notification",
                    order_id=str(order.id),
                    order_number=order.order_number,
                    error=str(exc),
                )
                return []

        failed = [r for r in results if r.errors]
        if failed:
            logger.warning(
                "Order notification delivered with errors",
                order_id=str(order.id),
                channels=[r.channel.value for r in failed],
            )
        else:
            logger.info("Order notification sent", order_id=str(order.id))
        return results

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
