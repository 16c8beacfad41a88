from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Any

from devcamper.core.config import settings


class EmailDeliveryError(Exception):
    pass


logger = logging.getLogger("uvicorn.error")


def _normalize_email(value: str | None) -> str:
    return str(value or "").strip().lower()


def _sender() -> str:
    address = str(settings.FROM_EMAIL or "").strip()
    name = str(settings.FROM_NAME or "").strip()
    if not address:
        return ""
    return f"{name} <{address}>" if name else address


def _mock_send(*, email: str, subject: str, body: str) -> dict[str, Any]:
    logger.warning("[EMAIL MOCK] to=%s subject=%s body=%s", email, subject, body)
    return {
        "provider": "mock_email",
        "status": "accepted",
        "sent": False,
        "mocked": True,
    }


def _send_smtp(*, email: str, subject: str, body: str) -> dict[str, Any]:
    host = str(settings.SMTP_HOST or "").strip()
    port = int(settings.SMTP_PORT or 0)
    username = str(settings.SMTP_USER or "").strip()
    password = str(settings.SMTP_PASSWORD or "").strip()
    sender = _sender()
    use_tls = bool(settings.SMTP_USE_TLS)
    use_ssl = bool(settings.SMTP_USE_SSL)

    if not host or not port or not sender:
        raise EmailDeliveryError("SMTP_HOST/SMTP_PORT/FROM_EMAIL are not configured")
    if use_tls and use_ssl:
        raise EmailDeliveryError("SMTP_USE_TLS and SMTP_USE_SSL cannot both be enabled")

    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = email
    msg["Subject"] = subject
    msg.set_content(body)

    try:
        if use_ssl:
            smtp = smtplib.SMTP_SSL(host=host, port=port, timeout=15)
        else:
            smtp = smtplib.SMTP(host=host, port=port, timeout=15)
        with smtp as client:
            client.ehlo()
            if use_tls:
                client.starttls()
                client.ehlo()
            if username:
                client.login(username, password)
            client.send_message(msg)
    except Exception as exc:
        raise EmailDeliveryError(f"Email delivery failed: {exc}") from exc

    logger.info("email sent to=%s subject=%s", email, subject)
    return {"provider": "smtp", "status": "accepted", "sent": True}


def send_email(*, email: str, subject: str, message: str) -> dict[str, Any]:
    normalized_email = _normalize_email(email)
    if not normalized_email:
        raise EmailDeliveryError("Invalid email address")

    provider = str(settings.EMAIL_PROVIDER or "dummy").strip().lower()
    if provider in {"", "dummy", "mock", "console"}:
        return _mock_send(email=normalized_email, subject=subject, body=message)
    if provider == "smtp":
        return _send_smtp(email=normalized_email, subject=subject, body=message)

    raise EmailDeliveryError(f"Unknown EMAIL_PROVIDER: {provider}")


def email_provider_health() -> dict[str, Any]:
    provider = str(settings.EMAIL_PROVIDER or "dummy").strip().lower()
    if provider in {"", "dummy", "mock", "console"}:
        return {"provider": "dummy", "status": "ok", "mode": "mock", "can_send": True, "issues": []}

    if provider == "smtp":
        checks = {
            "smtp_host_configured": bool(str(settings.SMTP_HOST or "").strip()),
            "from_email_configured": bool(str(settings.FROM_EMAIL or "").strip()),
        }
        issues = []
        if not checks["smtp_host_configured"]:
            issues.append("SMTP_HOST is not set")
        if not checks["from_email_configured"]:
            issues.append("FROM_EMAIL is not set")
        can_send = all(checks.values())
        return {
            "provider": "smtp",
            "status": "ok" if can_send else "degraded",
            "mode": "real",
            "can_send": can_send,
            "issues": issues,
        }

    return {
        "provider": provider,
        "status": "error",
        "mode": "unknown",
        "can_send": False,
        "issues": [f"Unknown EMAIL_PROVIDER: {provider}"],
    }
