import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

from hn_alert.storage import MAX_SEEN_ALERTS, SeenAlertStore, load_seen_alerts, save_seen_alerts

WHEN = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestSeenAlertStore:
    def test_in_memory(self) -> None:
        store = SeenAlertStore()
        assert store.last_alerted("k") is None
        store.mark("k", WHEN)
        assert store.last_alerted("k") == WHEN
        assert len(store) == 1

    def test_persists_and_reloads(self, tmp_path: Path) -> None:
        path = tmp_path / "seen.json"
        SeenAlertStore(path).mark("k", WHEN)

        assert path.exists()
        reloaded = SeenAlertStore(path)
        assert reloaded.last_alerted("k") == WHEN

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert load_seen_alerts(tmp_path / "absent.json") == {}

    def test_invalid_json_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "seen.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_seen_alerts(path) == {}

    def test_skips_bad_entries(self, tmp_path: Path) -> None:
        path = tmp_path / "seen.json"
        path.write_text(
            json.dumps({"items": {"good": "2024-03-01T12:00:00", "bad": "yesterday", "num": 3}}),
            encoding="utf-8",
        )
        seen = load_seen_alerts(path)
        assert list(seen) == ["good"]
        assert seen["good"].tzinfo is not None

    def test_save_keeps_newest(self, tmp_path: Path) -> None:
        path = tmp_path / "seen.json"
        seen = {f"k{i}": WHEN + timedelta(seconds=i) for i in range(MAX_SEEN_ALERTS + 5)}
        save_seen_alerts(path, seen)

        loaded = load_seen_alerts(path)
        assert len(loaded) == MAX_SEEN_ALERTS
        assert "k0" not in loaded
        assert f"k{MAX_SEEN_ALERTS + 4}" in loaded

    def test_invalid_utf8_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "seen.json"
        path.write_bytes(b"\xff\xfe garbage")
        assert load_seen_alerts(path) == {}
        assert len(SeenAlertStore(path)) == 0

    def test_unreadable_path_is_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "seen.json"
        path.mkdir()
        assert load_seen_alerts(path) == {}

    def test_write_failure_keeps_memory_record(self, tmp_path: Path) -> None:
        path = tmp_path / "missing" / "seen.json"
        store = SeenAlertStore(path)
        store.mark("k", WHEN)
        assert store.last_alerted("k") == WHEN
        assert not path.exists()

    def test_memory_capped_at_newest(self) -> None:
        store = SeenAlertStore()
        for i in range(MAX_SEEN_ALERTS + 5):
            store.mark(f"k{i}", WHEN + timedelta(seconds=i))
        assert len(store) == MAX_SEEN_ALERTS
        assert store.last_alerted("k0") is None
        assert store.last_alerted(f"k{MAX_SEEN_ALERTS + 4}") is not None
