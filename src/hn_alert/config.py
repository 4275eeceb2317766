import math
import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from .errors import ConfigError, MissingSettingError
from .utils import parse_domains

HN_DOMAIN_URL = "https://news.ycombinator.com/from?site={domain}"
HN_NEWEST_URL = "https://news.ycombinator.com/newest"

DEFAULT_ALERT_PERIOD = timedelta(minutes=20)
DEFAULT_ALERT_THRESHOLD = DEFAULT_ALERT_PERIOD
MAX_JITTER_SECONDS = 60

FETCH_TIMEOUT_MS = 30000
SMTP_TIMEOUT_SECONDS = 30
DEFAULT_SENDER = "hncheck@mutelight.org"
USER_AGENT = "hn-alert/0.1 (+https://news.ycombinator.com/from)"


@dataclass(frozen=True)
class Settings:
    domains: tuple[str, ...]
    recipient: str
    smtp_login: str
    smtp_password: str
    smtp_server: str
    smtp_port: int
    sender: str = DEFAULT_SENDER
    loop: bool = True
    alert_threshold: timedelta = DEFAULT_ALERT_THRESHOLD
    alert_period: timedelta = DEFAULT_ALERT_PERIOD
    dedup_window: timedelta = timedelta(0)
    seen_alerts_file: Path | None = None
    test_email: bool = False


def _required(environ: Mapping[str, str], name: str) -> str:
    value = (environ.get(name) or "").strip()
    if not value:
        raise MissingSettingError(name)
    return value


def _minutes(environ: Mapping[str, str], name: str, default: timedelta) -> timedelta:
    raw = (environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of minutes, got {raw!r}") from None
    if not math.isfinite(value) or value < 0:
        raise ConfigError(f"{name} must be a finite, non-negative number of minutes, got {raw!r}")
    try:
        return timedelta(minutes=value)
    except OverflowError:
        raise ConfigError(f"{name} is out of range, got {raw!r}") from None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build the immutable runtime settings from environment variables.

    Raises MissingSettingError naming the first absent required variable and
    ConfigError for values that are present but unusable.
    """
    env = os.environ if environ is None else environ

    domains = parse_domains(_required(env, "DOMAIN"))
    if not domains:
        raise ConfigError("need at least one value in: DOMAIN")

    recipient = _required(env, "RECIPIENT")
    smtp_login = _required(env, "SMTP_LOGIN")
    smtp_password = _required(env, "SMTP_PASSWORD")
    smtp_port_raw = _required(env, "SMTP_PORT")
    smtp_server = _required(env, "SMTP_SERVER")
    try:
        smtp_port = int(smtp_port_raw)
    except ValueError:
        raise ConfigError(f"SMTP_PORT must be an integer, got {smtp_port_raw!r}") from None

    alert_period = _minutes(env, "ALERT_PERIOD_MINUTES", DEFAULT_ALERT_PERIOD)
    if alert_period <= timedelta(seconds=MAX_JITTER_SECONDS):
        raise ConfigError(
            f"ALERT_PERIOD_MINUTES must exceed the {MAX_JITTER_SECONDS}s maximum jitter"
        )

    seen_file = (env.get("SEEN_ALERTS_FILE") or "").strip()

    return Settings(
        domains=tuple(domains),
        recipient=recipient,
        smtp_login=smtp_login,
        smtp_password=smtp_password,
        smtp_server=smtp_server,
        smtp_port=smtp_port,
        sender=(env.get("SMTP_SENDER") or "").strip() or DEFAULT_SENDER,
        loop=(env.get("LOOP") or "").strip().lower() != "false",
        alert_threshold=_minutes(env, "ALERT_THRESHOLD_MINUTES", DEFAULT_ALERT_THRESHOLD),
        alert_period=alert_period,
        dedup_window=_minutes(env, "ALERT_DEDUP_MINUTES", timedelta(0)),
        seen_alerts_file=Path(seen_file) if seen_file else None,
        test_email=(env.get("TEST_EMAIL") or "").strip().lower() == "true",
    )


def domain_url(domain: str) -> str:
    return HN_DOMAIN_URL.format(domain=domain)
