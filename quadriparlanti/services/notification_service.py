# /quadriparlanti/services/notification_service.py

"""
Outgoing email: invitations, password-reset links and review outcomes.

When no SMTP server is configured the message is logged instead of sent and
the call reports False, so callers can fall back to showing the link in the
UI. A delivery failure is never fatal for the operation that triggered it.
"""

import html
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from ..core.config import get_settings

logger = logging.getLogger(__name__)


def send_email(to_email: str, subject: str, html_body: str) -> bool:
    settings = get_settings()
    if not settings.smtp_enabled:
        logger.info("[EMAIL] to=%s subject=%r (SMTP not configured, message not sent)", to_email, subject)
        return False

    msg = MIMEMultipart()
    msg["From"] = settings.mail_from
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.attach(MIMEText(html_body, "html"))

    try:
        context = ssl.create_default_context()
        with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, context=context, timeout=5) as server:
            if settings.smtp_user:
                server.login(settings.smtp_user, settings.smtp_password or "")
            server.sendmail(settings.mail_from, to_email, msg.as_string())
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error("ERROR sending email to %s: %s", to_email, e)
        return False


def send_invitation_email(to_email: str, name: Optional[str], link: str) -> bool:
    body = (
        f"<p>Ciao {html.escape(name or '')},</p>"
        "<p>sei stato invitato come docente. Imposta la tua password da questo link:</p>"
        f'<p><a href="{link}">{link}</a></p>'
    )
    return send_email(to_email, "Invito alla piattaforma", body)


def send_password_reset_email(to_email: str, link: str) -> bool:
    body = (
        "<p>Abbiamo ricevuto una richiesta di reset della password.</p>"
        f'<p><a href="{link}">Reimposta la password</a></p>'
        "<p>Se non hai richiesto il reset, ignora questa email.</p>"
    )
    return send_email(to_email, "Reset della password", body)


def send_work_approved_email(to_email: str, teacher_name: Optional[str], work_title: str, work_url: str) -> bool:
    body = (
        f"<p>Ciao {html.escape(teacher_name or '')},</p>"
        f"<p>il lavoro <strong>{html.escape(work_title)}</strong> è stato approvato ed è ora pubblicato.</p>"
        f'<p><a href="{work_url}">{work_url}</a></p>'
    )
    return send_email(to_email, "Lavoro approvato", body)


def send_work_rejected_email(to_email: str, teacher_name: Optional[str], work_title: str, feedback: str) -> bool:
    body = (
        f"<p>Ciao {html.escape(teacher_name or '')},</p>"
        f"<p>il lavoro <strong>{html.escape(work_title)}</strong> richiede alcune modifiche prima della pubblicazione.</p>"
        f"<p>Commenti del revisore:</p><blockquote>{html.escape(feedback)}</blockquote>"
    )
    return send_email(to_email, "Lavoro da rivedere", body)
