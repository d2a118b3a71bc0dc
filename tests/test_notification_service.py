"""Notification buffering and delivery."""

import pytest

from autogitpull.services.notification_service import NotificationSink, SmtpMailTransport

from conftest import RecordingTransport


def test_no_recipients_means_no_buffer_and_no_delivery(transport):
    sink = NotificationSink([], transport)
    sink.record("line\n")

    assert not sink.enabled
    assert sink.flush("Deployment successful") is None
    assert transport.attempted == []


def test_flush_sends_whole_transcript_to_each_recipient(transport):
    sink = NotificationSink(["a@example.com", "b@example.com"], transport)
    sink.record("first\n")
    sink.record("second\n")

    message = sink.flush("Deployment successful")

    assert message.subject == "Deployment successful"
    assert message.body == "first\nsecond\n"
    assert message.recipients == ("a@example.com", "b@example.com")
    assert transport.sent == [
        ("a@example.com", "Deployment successful", "first\nsecond\n"),
        ("b@example.com", "Deployment successful", "first\nsecond\n"),
    ]


def test_one_failed_recipient_does_not_stop_the_others():
    transport = RecordingTransport(fail_for={"a@example.com"})
    sink = NotificationSink(["a@example.com", "b@example.com"], transport)
    sink.record("line\n")

    sink.flush("Deployment script failed")

    assert transport.attempted == ["a@example.com", "b@example.com"]
    assert [r for r, _, _ in transport.sent] == ["b@example.com"]
    assert sink.failed_recipients == ["a@example.com"]


def test_flush_only_once(transport):
    sink = NotificationSink(["a@example.com"], transport)
    sink.flush("Deployment successful")

    with pytest.raises(RuntimeError):
        sink.flush("Deployment successful")
    with pytest.raises(RuntimeError):
        sink.record("late line\n")
    assert len(transport.sent) == 1


def test_smtp_message_headers():
    smtp = SmtpMailTransport(sender="deploy@example.com")
    message = smtp.build_message("ops@example.com", "Deployment successful", "body text")

    assert message["From"] == "deploy@example.com"
    assert message["To"] == "ops@example.com"
    assert message["Subject"] == "Deployment successful"
    assert message.get_content().strip() == "body text"
