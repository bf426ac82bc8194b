from __future__ import annotations

import smtplib

import pytest
import requests

from kindergarten.core.exceptions import NotificationDeliveryFailure
from kindergarten.messaging import email_sender as email_module
from kindergarten.messaging.email_sender import SmtpEmailSender, SmtpSettings
from kindergarten.messaging.sms_sender import TwilioSettings, TwilioSmsSender


class FakeSMTP:
    instances: list["FakeSMTP"] = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.tls = False
        self.login_args = None
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.tls = True

    def login(self, user, password):
        self.login_args = (user, password)

    def send_message(self, msg):
        self.messages.append(msg)


class BrokenSMTP(FakeSMTP):
    def send_message(self, msg):
        raise smtplib.SMTPServerDisconnected("connection closed")


@pytest.fixture(autouse=True)
def _reset_smtp():
    FakeSMTP.instances = []


def test_smtp_sender_builds_html_message(monkeypatch):
    monkeypatch.setattr(email_module.smtplib, "SMTP", FakeSMTP)
    sender = SmtpEmailSender(SmtpSettings(host="smtp.test", port=2525, username="u", password="p", timeout=3))

    sender.send(to="jane@example.com", subject="Attendance update for Lina", html_body="<p>hi</p>")

    [smtp] = FakeSMTP.instances
    assert (smtp.host, smtp.port, smtp.timeout) == ("smtp.test", 2525, 3)
    assert smtp.tls is True
    assert smtp.login_args == ("u", "p")
    [msg] = smtp.messages
    assert msg["To"] == "jane@example.com"
    assert msg["Subject"] == "Attendance update for Lina"
    assert msg.get_body(preferencelist=("html",)).get_content().strip() == "<p>hi</p>"


def test_smtp_sender_wraps_transport_errors(monkeypatch):
    monkeypatch.setattr(email_module.smtplib, "SMTP", BrokenSMTP)
    sender = SmtpEmailSender(SmtpSettings(host="smtp.test", use_tls=False))

    with pytest.raises(NotificationDeliveryFailure):
        sender.send(to="jane@example.com", subject="s", html_body="<p>x</p>")


class FakeResponse:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


def _settings():
    return TwilioSettings(account_sid="AC123", auth_token="secret", from_number="+1999", timeout=2)


def test_twilio_sender_posts_message():
    session = FakeSession(FakeResponse(201))

    TwilioSmsSender(_settings(), session=session).send(to="+1234567890", body="Lina has been picked up")

    [(url, kwargs)] = session.calls
    assert url.endswith("/Accounts/AC123/Messages.json")
    assert kwargs["data"] == {"To": "+1234567890", "From": "+1999", "Body": "Lina has been picked up"}
    assert kwargs["auth"] == ("AC123", "secret")
    assert kwargs["timeout"] == 2


def test_twilio_sender_rejected_message_raises():
    session = FakeSession(FakeResponse(400, '{"message": "invalid To"}'))

    with pytest.raises(NotificationDeliveryFailure):
        TwilioSmsSender(_settings(), session=session).send(to="bad", body="x")


def test_twilio_sender_network_error_raises():
    session = FakeSession(error=requests.ConnectionError("no route"))

    with pytest.raises(NotificationDeliveryFailure):
        TwilioSmsSender(_settings(), session=session).send(to="+1", body="x")
