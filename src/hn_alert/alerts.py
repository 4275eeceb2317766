from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from .config import Settings
from .errors import NotifyError
from .logging_utils import logger
from .models import DomainResult, ItemAge
from .storage import SeenAlertStore
from .utils import format_age, make_alert_key

Notifier = Callable[[str], None]
Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AlwaysAlert:
    """Alert on every cycle for as long as an item stays within the threshold."""

    def should_alert(self, domain: str, item: ItemAge) -> bool:
        return True

    def record(self, domain: str, item: ItemAge) -> None:
        return None


class SuppressSeen:
    """Skip repeat alerts for an item already alerted within ``window``.

    Items are keyed by domain and site item id. Ages with no item id cannot be
    told apart, so they always alert.
    """

    def __init__(self, store: SeenAlertStore, window: timedelta, *, clock: Clock = _utcnow) -> None:
        self.store = store
        self.window = window
        self.clock = clock

    def should_alert(self, domain: str, item: ItemAge) -> bool:
        if item.item_id is None:
            return True
        last = self.store.last_alerted(make_alert_key(domain, item.item_id))
        return last is None or self.clock() - last >= self.window

    def record(self, domain: str, item: ItemAge) -> None:
        if item.item_id is None:
            return
        self.store.mark(make_alert_key(domain, item.item_id), self.clock())


AlertPolicy = AlwaysAlert | SuppressSeen


def build_policy(settings: Settings) -> AlertPolicy:
    if settings.dedup_window <= timedelta(0):
        return AlwaysAlert()
    return SuppressSeen(SeenAlertStore(settings.seen_alerts_file), settings.dedup_window)


def qualifying_ages(ages: list[ItemAge], threshold: timedelta) -> list[ItemAge]:
    return [item for item in ages if item.age <= threshold]


def evaluate_domain(
    result: DomainResult,
    *,
    threshold: timedelta,
    notify: Notifier,
    policy: AlertPolicy,
) -> None:
    for item in result.ages:
        logger.info(
            f"Found an item with age: {format_age(item.age)}",
            extra={"event": "age_found", "domain": result.domain, "age_seconds": int(item.age.total_seconds())},
        )

    for item in qualifying_ages(result.ages, threshold):
        if not policy.should_alert(result.domain, item):
            result.alerts_suppressed += 1
            logger.info(
                "Item already alerted recently; suppressing repeat alert",
                extra={"event": "alert_suppressed", "domain": result.domain},
            )
            continue

        logger.info(
            "Item's age is within alert threshold; sending alert",
            extra={"event": "alert", "domain": result.domain, "age_seconds": int(item.age.total_seconds())},
        )
        try:
            notify(result.domain)
        except NotifyError as exc:
            result.notify_errors.append(exc)
            logger.error(
                "Alert delivery failed; continuing with remaining items",
                extra={"event": "alert_failed", "domain": result.domain},
                exc_info=True,
            )
            continue

        result.alerts_sent += 1
        policy.record(result.domain, item)
