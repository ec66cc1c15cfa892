"""
Vetlyst Backend — Notification Service & Resend Sender Tests
==============================================================

What:  Best-effort email behaviour, with the provider mocked out.

What we test:
    ✅ Appointment email goes to the clinic with reply-to = pet owner
    ✅ No clinic email / no credentials → skipped, no error
    ✅ Sender failure never propagates
    ✅ Claim admin and claimant emails are independent
    ✅ Circuit breaker state machine
    ✅ ResendEmailSender wraps SDK errors in NotificationError
"""

import time
import uuid
from unittest.mock import patch

import pytest

from vetlyst.exceptions import NotificationError
from vetlyst.models import AppointmentRequest, ClinicClaim
from vetlyst.services.resend_service import CircuitBreaker, ResendEmailSender


def _appointment(**overrides) -> AppointmentRequest:
    values = {
        "id": uuid.uuid4(),
        "clinic_place_id": "ChIJB4dgr0000000000000001",
        "clinic_name": "Badger Animal Hospital",
        "clinic_email": "frontdesk@badgeranimal.example",
        "pet_owner_name": "Jane Doe",
        "pet_owner_email": "jane@example.com",
        "pet_owner_phone": "608-555-0100",
        "pet_name": "Biscuit",
        "pet_type": "dog",
        "preferred_date": "2024-03-18",
        "preferred_time": "morning",
        "status": "pending",
    }
    values.update(overrides)
    return AppointmentRequest(**values)


def _claim(**overrides) -> ClinicClaim:
    values = {
        "id": uuid.uuid4(),
        "clinic_place_id": "ChIJN1t_tDeuEmsRUsoyG83frY4",
        "clinic_name": "Ace Vet",
        "claimant_name": "Dr. Sam Lee",
        "claimant_email": "sam@acevet.example",
        "claimant_role": "owner",
        "verification_method": "phone",
        "status": "pending",
    }
    values.update(overrides)
    return ClinicClaim(**values)


class TestNotifyAppointment:

    @pytest.mark.asyncio
    async def test_sends_to_clinic_with_owner_reply_to(self, notifier, fake_sender):
        delivered = await notifier.notify_appointment(_appointment())

        assert delivered == ["frontdesk@badgeranimal.example"]
        email = fake_sender.sent[0]
        assert email["subject"] == "New Appointment Request from Jane Doe"
        assert email["reply_to"] == "jane@example.com"
        assert email["from"] == "Vetlyst <appointments@vetlyst.com>"

    @pytest.mark.asyncio
    async def test_skipped_without_clinic_email(self, notifier, fake_sender):
        assert await notifier.notify_appointment(_appointment(clinic_email=None)) == []
        assert fake_sender.attempts == []

    @pytest.mark.asyncio
    async def test_skipped_when_sender_not_configured(self, notifier, fake_sender):
        fake_sender.configured = False
        assert await notifier.notify_appointment(_appointment()) == []
        assert fake_sender.attempts == []

    @pytest.mark.asyncio
    async def test_provider_failure_is_swallowed(self, notifier, fake_sender):
        fake_sender.fail = True
        assert await notifier.notify_appointment(_appointment()) == []
        assert fake_sender.attempts == ["frontdesk@badgeranimal.example"]

    @pytest.mark.asyncio
    async def test_unexpected_sender_bug_is_swallowed(self, notifier, fake_sender):
        with patch.object(fake_sender, "send", side_effect=RuntimeError("boom")):
            assert await notifier.notify_appointment(_appointment()) == []


class TestNotifyClaim:

    @pytest.mark.asyncio
    async def test_admin_and_claimant_both_notified(self, notifier, fake_sender):
        delivered = await notifier.notify_claim(_claim())

        assert delivered == ["claims@vetlyst.com", "sam@acevet.example"]
        subjects = [email["subject"] for email in fake_sender.sent]
        assert subjects == [
            "New Clinic Claim Request: Ace Vet",
            "Claim Request Received for Ace Vet",
        ]

    @pytest.mark.asyncio
    async def test_confirmation_sent_even_if_admin_email_fails(self, notifier, fake_sender):
        fake_sender.fail_for = "claims@vetlyst.com"
        delivered = await notifier.notify_claim(_claim())

        assert delivered == ["sam@acevet.example"]
        assert fake_sender.attempts == ["claims@vetlyst.com", "sam@acevet.example"]

    @pytest.mark.asyncio
    async def test_all_failures_return_empty(self, notifier, fake_sender):
        fake_sender.fail = True
        assert await notifier.notify_claim(_claim()) == []
        assert len(fake_sender.attempts) == 2


class TestCircuitBreaker:

    def test_initial_state_is_closed(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        assert cb.state == "closed"
        assert cb.can_execute() is True

    def test_opens_at_threshold(self):
        cb = CircuitBreaker(failure_threshold=3, recovery_timeout=60)
        for _ in range(2):
            cb.record_failure()
        assert cb.state == "closed"
        cb.record_failure()
        assert cb.state == "open"

    def test_open_circuit_rejects_sends(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=60)
        cb.record_failure()
        with pytest.raises(NotificationError):
            cb.can_execute()

    def test_half_open_after_recovery_timeout(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        time.sleep(0.01)
        assert cb.can_execute() is True
        assert cb.state == "half_open"

    def test_half_open_failure_reopens(self):
        cb = CircuitBreaker(failure_threshold=3, recovery_timeout=0)
        for _ in range(3):
            cb.record_failure()
        cb.can_execute()
        cb.record_failure()
        assert cb.state == "open"

    def test_half_open_allows_a_single_trial_send(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        time.sleep(0.01)

        assert cb.can_execute() is True
        # A second background task while the trial is outstanding is refused
        with pytest.raises(NotificationError):
            cb.can_execute()

        cb.record_success()
        assert cb.can_execute() is True
        assert cb.can_execute() is True

    def test_success_closes_and_resets(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        cb.record_success()
        assert cb.state == "closed"
        assert cb.failure_count == 0


class TestResendEmailSender:

    @pytest.mark.asyncio
    async def test_send_returns_message_id(self):
        sender = ResendEmailSender(api_key="re_test")
        with patch("vetlyst.services.resend_service.resend.Emails.send", return_value={"id": "abc123"}) as mock_send:
            message_id = await sender.send(
                from_address="Vetlyst <noreply@vetlyst.com>",
                to="sam@acevet.example",
                subject="Hi",
                html="<p>Hi</p>",
                reply_to="jane@example.com",
            )

        assert message_id == "abc123"
        params = mock_send.call_args.args[0]
        assert params["to"] == ["sam@acevet.example"]
        assert params["reply_to"] == "jane@example.com"

    @pytest.mark.asyncio
    async def test_sdk_error_becomes_notification_error(self):
        sender = ResendEmailSender(api_key="re_test", failure_threshold=2)
        with patch("vetlyst.services.resend_service.resend.Emails.send", side_effect=Exception("422 invalid from")):
            with pytest.raises(NotificationError):
                await sender.send("a@vetlyst.com", "b@example.com", "s", "<p></p>")
        assert sender.circuit_breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_open_circuit_skips_api_call(self):
        sender = ResendEmailSender(api_key="re_test", failure_threshold=2)
        sender.circuit_breaker.record_failure()
        sender.circuit_breaker.record_failure()

        with patch("vetlyst.services.resend_service.resend.Emails.send") as mock_send:
            with pytest.raises(NotificationError):
                await sender.send("a@vetlyst.com", "b@example.com", "s", "<p></p>")
        mock_send.assert_not_called()
        assert sender.status() == "circuit_open"

    @pytest.mark.asyncio
    async def test_unconfigured_sender_refuses(self):
        sender = ResendEmailSender(api_key="")
        assert sender.status() == "not_configured"
        with pytest.raises(NotificationError):
            await sender.send("a@vetlyst.com", "b@example.com", "s", "<p></p>")
