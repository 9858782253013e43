"""
Send PrepBuddy reminder and progress emails via SMTP (Gmail or any relay).
Set SMTP_USER, SMTP_PASSWORD (and optionally NOTIFY_FROM) in .env. Use a Gmail App Password, not your normal password.
Every sender returns True if sent, False if skipped or failed; failures never raise.
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from prepbuddy.config import settings
from prepbuddy.core.constants import PROGRAM_DAYS

logger = logging.getLogger(__name__)


def _from_address() -> str:
    if (settings.notify_from or "").strip():
        return settings.notify_from.strip()
    user = (settings.smtp_user or "").strip()
    if user:
        return f"PrepBuddy <{user}>"
    return "PrepBuddy <noreply@localhost>"


def _send(to_email: str, subject: str, text: str, html: str) -> bool:
    to_email = (to_email or "").strip()
    if not to_email:
        return False
    user = (settings.smtp_user or "").strip()
    password = (settings.smtp_password or "").strip()
    if not user or not password:
        logger.debug("SMTP_USER or SMTP_PASSWORD not set; skipping email %r", subject)
        return False
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = _from_address()
    msg["To"] = to_email
    msg.attach(MIMEText(text, "plain"))
    msg.attach(MIMEText(html, "html"))
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=10) as server:
            server.starttls()
            server.login(user, password)
            server.sendmail(user, [to_email], msg.as_string())
        logger.info("Email %r sent to %s", subject, to_email)
        return True
    except (smtplib.SMTPException, OSError):
        logger.warning("Failed to send email %r to %s", subject, to_email, exc_info=True)
        return False


def daily_reminder_content(current_day: int) -> tuple[str, str, str]:
    """(subject, text, html) for the daily reminder."""
    subject = f"PrepBuddy Day {current_day} Reminder"
    text = (
        "Time to tackle today's tasks!\n\n"
        f"Don't forget to complete your tasks for Day {current_day}.\n"
        "Keep up the great work and maintain your streak! 💪"
    )
    html = (
        "<h2>Time to tackle today's tasks!</h2>"
        f"<p>Don't forget to complete your tasks for Day {current_day}.</p>"
        "<p>Keep up the great work and maintain your streak! 💪</p>"
    )
    return subject, text, html


def progress_update_content(current_day: int, completion_rate: int, streak: int) -> tuple[str, str, str]:
    """(subject, text, html) for the progress update."""
    subject = f"PrepBuddy Progress Update - Day {current_day}"
    items = [
        f"Current Day: {current_day}/{PROGRAM_DAYS}",
        f"Completion Rate: {completion_rate}%",
        f"Current Streak: {streak} days",
    ]
    text = "Your Progress Update\n\n" + "\n".join(f"• {i}" for i in items) + "\n\nKeep pushing forward! You're doing great! 🎯"
    html = (
        "<h2>Your Progress Update</h2><ul>"
        + "".join(f"<li>{i}</li>" for i in items)
        + "</ul><p>Keep pushing forward! You're doing great! 🎯</p>"
    )
    return subject, text, html


def send_daily_reminder(to_email: str, current_day: int) -> bool:
    subject, text, html = daily_reminder_content(current_day)
    return _send(to_email, subject, text, html)


def send_progress_update(to_email: str, current_day: int, completion_rate: int, streak: int) -> bool:
    subject, text, html = progress_update_content(current_day, completion_rate, streak)
    return _send(to_email, subject, text, html)
