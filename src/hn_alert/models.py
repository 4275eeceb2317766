from dataclasses import dataclass, field
from datetime import timedelta

from .errors import NotifyError


@dataclass(frozen=True)
class ItemAge:
    age: timedelta
    raw: str
    item_id: str | None = None


@dataclass
class DomainResult:
    domain: str
    url: str
    ages: list[ItemAge] = field(default_factory=list)
    alerts_sent: int = 0
    alerts_suppressed: int = 0
    error: Exception | None = None
    notify_errors: list[NotifyError] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.error is not None or bool(self.notify_errors)


@dataclass
class CycleReport:
    cycle: int
    results: list[DomainResult] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return any(result.failed for result in self.results)

    @property
    def alerts_sent(self) -> int:
        return sum(result.alerts_sent for result in self.results)
