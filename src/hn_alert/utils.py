import hashlib
import random
from datetime import timedelta


def normalize_whitespace(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = " ".join(value.split())
    return normalized or None


def make_alert_key(domain: str, item_id: str) -> str:
    return hashlib.sha256(f"{domain}|{item_id}".encode("utf-8")).hexdigest()


def parse_domains(value: str | None) -> list[str]:
    if not value:
        return []

    domains: list[str] = []
    for part in value.split(","):
        domain = normalize_whitespace(part)
        if not domain:
            continue
        domains.append(domain)
    return domains


def compute_sleep_duration(
    period: timedelta,
    *,
    max_jitter_seconds: int,
    rng: random.Random | None = None,
) -> timedelta:
    """Return ``period`` minus a whole-second jitter drawn from [0, max_jitter_seconds)."""
    source = rng if rng is not None else random
    jitter = source.randrange(0, max_jitter_seconds)
    return period - timedelta(seconds=jitter)


def format_age(age: timedelta) -> str:
    total = int(age.total_seconds())
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)
    parts: list[str] = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds or not parts:
        parts.append(f"{seconds}s")
    return "".join(parts)
