import random
import time
from collections.abc import Callable, Mapping
from dataclasses import replace
from functools import partial

from .alerts import AlertPolicy, AlwaysAlert, Notifier, build_policy, evaluate_domain
from .config import MAX_JITTER_SECONDS, Settings, domain_url, load_settings
from .emailer import send_domain_alert
from .errors import ConfigError, ExtractionError, FetchError, NotifyError
from .extractors import extract_item_ages
from .fetcher import fetch_listing
from .logging_utils import configure_logging, logger
from .models import CycleReport, DomainResult
from .utils import compute_sleep_duration

Fetcher = Callable[[str], str]
Sleeper = Callable[[float], None]


def check_domain(
    domain: str,
    settings: Settings,
    *,
    fetch: Fetcher,
    notify: Notifier,
    policy: AlertPolicy,
) -> DomainResult:
    url = domain_url(domain)
    result = DomainResult(domain=domain, url=url)

    try:
        content = fetch(url)
    except FetchError as exc:
        result.error = exc
        logger.warning(str(exc), extra={"event": "fetch_failed", "domain": domain, "url": url})
        return result

    try:
        result.ages = extract_item_ages(content)
    except ExtractionError as exc:
        result.error = exc
        logger.warning(
            f"error while parsing durations: {exc}",
            extra={"event": "extract_failed", "domain": domain, "url": url},
        )
        return result

    logger.info(
        "Extracted item ages",
        extra={"event": "extract_complete", "domain": domain, "count": len(result.ages)},
    )
    evaluate_domain(result, threshold=settings.alert_threshold, notify=notify, policy=policy)
    return result


def run_cycle(
    settings: Settings,
    *,
    fetch: Fetcher,
    notify: Notifier,
    policy: AlertPolicy,
    cycle: int = 1,
) -> CycleReport:
    report = CycleReport(cycle=cycle)
    logger.info("Cycle started", extra={"event": "cycle_start", "cycle": cycle, "count": len(settings.domains)})

    for domain in settings.domains:
        try:
            result = check_domain(domain, settings, fetch=fetch, notify=notify, policy=policy)
        except Exception as exc:
            logger.error(
                "Unexpected failure while checking domain; continuing with next domain",
                extra={"event": "domain_failed", "cycle": cycle, "domain": domain},
                exc_info=True,
            )
            result = DomainResult(domain=domain, url=domain_url(domain), error=exc)
        report.results.append(result)

    log = logger.warning if report.failed else logger.info
    log(
        "Cycle complete",
        extra={"event": "cycle_complete", "cycle": cycle, "count": report.alerts_sent},
    )
    return report


def dry_run_notifier(domain: str) -> None:
    logger.info("Email sending disabled; alert not sent", extra={"event": "email_disabled", "domain": domain})


def run_loop(
    settings: Settings,
    *,
    fetch: Fetcher = fetch_listing,
    notify: Notifier | None = None,
    policy: AlertPolicy | None = None,
    sleep: Sleeper = time.sleep,
    rng: random.Random | None = None,
) -> int:
    """Poll every domain once per cycle; only returns in single-shot mode.

    The return value is the process exit status: 1 when any domain recorded an
    error during the single cycle, 0 otherwise.
    """
    if notify is None:
        notify = partial(send_domain_alert, settings)
    if policy is None:
        # A dry run must not mark items as alerted for later real runs.
        policy = AlwaysAlert() if notify is dry_run_notifier else build_policy(settings)

    cycle = 0
    while True:
        cycle += 1
        report = run_cycle(settings, fetch=fetch, notify=notify, policy=policy, cycle=cycle)

        if not settings.loop:
            logger.info("Single-shot run finished", extra={"event": "stopped", "cycle": cycle})
            return 1 if report.failed else 0

        # Jitter keeps requests off a perfectly predictable schedule.
        sleep_duration = compute_sleep_duration(
            settings.alert_period,
            max_jitter_seconds=MAX_JITTER_SECONDS,
            rng=rng,
        )
        logger.info(
            f"Sleeping for {sleep_duration} between runs",
            extra={"event": "sleeping", "cycle": cycle, "sleep_seconds": int(sleep_duration.total_seconds())},
        )
        sleep(sleep_duration.total_seconds())


def send_test_alert(settings: Settings) -> int:
    domain = settings.domains[0]
    try:
        send_domain_alert(settings, domain)
    except NotifyError:
        logger.error("Test email was not sent", extra={"event": "test_email_failed", "domain": domain}, exc_info=True)
        return 1
    logger.info(f"Test email sent: {settings.recipient}", extra={"event": "test_email_ok", "domain": domain})
    return 0


def run_pipeline(
    *,
    enable_email: bool = True,
    once: bool = False,
    environ: Mapping[str, str] | None = None,
) -> int:
    configure_logging()

    try:
        settings = load_settings(environ)
    except ConfigError as exc:
        logger.error(str(exc), extra={"event": "config_invalid"})
        return 2

    if once:
        settings = replace(settings, loop=False)

    if settings.test_email:
        return send_test_alert(settings)

    if not enable_email:
        return run_loop(settings, notify=dry_run_notifier, policy=AlwaysAlert())
    return run_loop(settings)


def main() -> int:
    return run_pipeline(enable_email=True)
