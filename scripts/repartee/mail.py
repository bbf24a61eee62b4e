"""SMTP delivery of the HTML summary."""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage

from scripts.repartee.config import MailConfig
from scripts.repartee.errors import DeliveryError

logger = logging.getLogger("repartee.mail")

SUBJECT = "\U0001f575\ufe0f Clever Discrepancy Report"


def compose(config: MailConfig, subject: str, html_body: str) -> EmailMessage:
    """Build an inline, quoted-printable, UTF-8 HTML message."""
    msg = EmailMessage()
    msg["From"] = config.from_email
    msg["To"] = config.to_email
    msg["Subject"] = subject
    msg.set_content(
        html_body,
        subtype="html",
        charset="utf-8",
        cte="quoted-printable",
        disposition="inline",
    )
    return msg


def send(config: MailConfig, msg: EmailMessage, timeout: float = 30.0) -> None:
    """Send over STARTTLS so the plain-auth password never travels in clear.

    Localhost relays are allowed without TLS.
    """
    try:
        with smtplib.SMTP(config.host, config.port, timeout=timeout) as smtp:
            if config.host not in ("localhost", "127.0.0.1"):
                smtp.starttls(context=ssl.create_default_context())
            smtp.login(config.from_email, config.password)
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        raise DeliveryError(f"Unable to send summary email via {config.host}: {exc}") from exc
    logger.info("Sent summary email to %s", config.to_email)


def mail(config: MailConfig, subject: str, html_body: str) -> None:
    try:
        msg = compose(config, subject, html_body)
    except (ValueError, TypeError) as exc:
        raise DeliveryError(f"Unable to compose summary email: {exc}") from exc
    send(config, msg)
