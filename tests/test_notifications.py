"""Tests for email content, the notifications endpoint and the daily reminder job."""
import smtplib

import pytest

from prepbuddy.config import settings
from prepbuddy.scheduler.reminder_job import run_daily_reminder_job
from prepbuddy.services import email_notify
from prepbuddy.services.tracker.notification_settings import update_settings
from prepbuddy.services.tracker.progress import set_current_day
from prepbuddy.services.user_service import ensure_user

ENDPOINT = "/functions/notifications"


class TestContent:
    def test_daily_reminder(self):
        subject, text, html = email_notify.daily_reminder_content(7)
        assert subject == "PrepBuddy Day 7 Reminder"
        assert "Day 7" in text
        assert "<h2>" in html

    def test_progress_update(self):
        subject, text, html = email_notify.progress_update_content(12, 85, 4)
        assert subject == "PrepBuddy Progress Update - Day 12"
        assert "Current Day: 12/100" in text
        assert "Completion Rate: 85%" in text
        assert "<li>Current Streak: 4 days</li>" in html


class TestSmtp:
    def test_unconfigured_is_noop(self, monkeypatch):
        monkeypatch.setattr(settings, "smtp_user", "")
        monkeypatch.setattr(settings, "smtp_password", "")
        assert email_notify.send_daily_reminder("a@example.com", 1) is False

    def test_smtp_failure_returns_false(self, monkeypatch):
        monkeypatch.setattr(settings, "smtp_user", "bot@example.com")
        monkeypatch.setattr(settings, "smtp_password", "secret")

        def refuse(*args, **kwargs):
            raise smtplib.SMTPConnectError(421, "try later")

        monkeypatch.setattr(smtplib, "SMTP", refuse)
        assert email_notify.send_progress_update("a@example.com", 2, 50, 1) is False

    def test_sends_multipart_message(self, monkeypatch):
        monkeypatch.setattr(settings, "smtp_user", "bot@example.com")
        monkeypatch.setattr(settings, "smtp_password", "secret")
        monkeypatch.setattr(settings, "notify_from", "")
        sent = []

        class FakeSMTP:
            def __init__(self, host, port, timeout=None):
                self.host = host

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

            def starttls(self):
                pass

            def login(self, user, password):
                assert (user, password) == ("bot@example.com", "secret")

            def sendmail(self, from_addr, to_addrs, message):
                sent.append((from_addr, to_addrs, message))

        monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
        assert email_notify.send_daily_reminder("student@example.com", 3) is True
        from_addr, to_addrs, message = sent[0]
        assert to_addrs == ["student@example.com"]
        assert "From: PrepBuddy <bot@example.com>" in message
        assert "Subject: PrepBuddy Day 3 Reminder" in message


class TestEndpoint:
    @pytest.mark.asyncio
    async def test_missing_email_is_400(self, client):
        resp = await client.post(ENDPOINT, json={"type": "daily_reminder", "currentDay": 2})
        assert resp.status_code == 400
        assert "error" in resp.json()

    @pytest.mark.asyncio
    async def test_unknown_type_is_400(self, client):
        resp = await client.post(ENDPOINT, json={"type": "weekly", "email": "a@example.com"})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_progress_update_sent(self, client, sent_emails):
        resp = await client.post(
            ENDPOINT,
            json={"type": "progress_update", "email": "a@example.com", "currentDay": 5, "completionRate": 60, "streak": 3},
        )
        assert resp.json() == {"success": True}
        assert sent_emails == [("a@example.com", "PrepBuddy Progress Update - Day 5")]


def test_daily_job_respects_preferences(db, session_factory, sent_emails):
    ensure_user(db, "on", "on@example.com")
    set_current_day(db, "on", 4)
    ensure_user(db, "off", "off@example.com")
    update_settings(db, "off", daily_reminders=False)
    ensure_user(db, "no-email")

    assert run_daily_reminder_job(session_factory) == 1
    assert sent_emails == [("on@example.com", "PrepBuddy Day 4 Reminder")]
