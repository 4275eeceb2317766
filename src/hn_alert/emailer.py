import smtplib
from email.message import EmailMessage

from .config import HN_NEWEST_URL, SMTP_TIMEOUT_SECONDS, Settings
from .errors import NotifyError
from .logging_utils import logger


def build_domain_message(settings: Settings, domain: str) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = f"New HN submission for '{domain}'"
    msg["From"] = settings.sender
    msg["To"] = settings.recipient
    msg.set_content(f"New HN submission for '{domain}'. Please see:\n\n{HN_NEWEST_URL}\n")
    return msg


def send_email(settings: Settings, msg: EmailMessage) -> None:
    with smtplib.SMTP(settings.smtp_server, settings.smtp_port, timeout=SMTP_TIMEOUT_SECONDS) as smtp:
        smtp.ehlo()
        smtp.starttls()
        smtp.ehlo()
        smtp.login(settings.smtp_login, settings.smtp_password)
        smtp.send_message(msg)


def send_domain_alert(settings: Settings, domain: str) -> None:
    msg = build_domain_message(settings, domain)
    try:
        send_email(settings, msg)
    except (smtplib.SMTPException, OSError) as exc:
        raise NotifyError(domain, str(exc) or exc.__class__.__name__) from exc
    logger.info(
        "Alert email sent",
        extra={"event": "email_sent", "domain": domain},
    )
