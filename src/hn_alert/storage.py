import json
from datetime import datetime, timezone
from pathlib import Path

from .logging_utils import logger

MAX_SEEN_ALERTS = 500


class SeenAlertStore:
    """Remembers when each alert key last triggered an email.

    Kept in memory and capped at the newest MAX_SEEN_ALERTS keys; written to
    ``path`` after every change when a path is given. A failed write is logged
    and the in-memory record is kept.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._seen: dict[str, datetime] = {}
        if path is not None:
            self._seen = load_seen_alerts(path)

    def last_alerted(self, key: str) -> datetime | None:
        return self._seen.get(key)

    def mark(self, key: str, when: datetime) -> None:
        self._seen[key] = when
        if len(self._seen) > MAX_SEEN_ALERTS:
            self._seen = _newest(self._seen)
        if self.path is None:
            return
        try:
            save_seen_alerts(self.path, self._seen)
        except OSError:
            logger.error(
                "Could not write seen-alerts file; keeping record in memory",
                extra={"event": "seen_save_failed", "path": str(self.path)},
                exc_info=True,
            )

    def __len__(self) -> int:
        return len(self._seen)


def _newest(seen: dict[str, datetime]) -> dict[str, datetime]:
    rows = sorted(seen.items(), key=lambda row: row[1], reverse=True)[:MAX_SEEN_ALERTS]
    return dict(rows)


def load_seen_alerts(path: Path) -> dict[str, datetime]:
    if not path.exists():
        logger.info(
            "Seen-alerts file missing; starting empty",
            extra={"event": "seen_missing", "path": str(path)},
        )
        return {}

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError, OSError):
        logger.warning(
            "Seen-alerts file is unreadable or invalid; treating as empty",
            extra={"event": "seen_invalid", "path": str(path)},
            exc_info=True,
        )
        return {}

    items = raw.get("items") if isinstance(raw, dict) else None
    if not isinstance(items, dict):
        return {}

    seen: dict[str, datetime] = {}
    for key, value in items.items():
        if not isinstance(value, str):
            continue
        try:
            when = datetime.fromisoformat(value)
        except ValueError:
            continue
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        seen[key] = when
    return seen


def save_seen_alerts(path: Path, seen: dict[str, datetime]) -> None:
    newest = _newest(seen).items()
    payload = {
        "updated_at_utc": datetime.now(timezone.utc).isoformat(),
        "items": {key: when.isoformat() for key, when in newest},
    }
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info(
        "Seen-alerts file updated",
        extra={"event": "seen_saved", "count": len(payload["items"]), "path": str(path)},
    )
