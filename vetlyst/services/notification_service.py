"""
Vetlyst Backend — Notification Service
========================================

What:  Sends the emails that follow a committed submission.
Why:   Clinics learn about appointment requests, admins about claims, and
       claimants get a confirmation, without coupling any of it to the
       success of the submission itself.
How:   Each notify_*() method builds the message(s) from the stored record
       and hands them to an EmailSender. Every failure is caught here,
       wrapped as NotificationError, logged, and dropped.
Who:   Scheduled by the submission routes as FastAPI background tasks.
When:  Strictly after SubmissionService has committed the row.

Delivery Policy (at-most-once, fire-and-forget):
    - No retry queue, no dead-letter table, no delivery tracking
    - The stored row is the source of truth; losing an email only costs
      latency until someone looks at the admin list
    - Process termination while a background task is in flight loses that
      email; this is accepted

Emails per submission:
    appointment → 0 or 1 (clinic, only when the request carries a clinic email)
    claim       → 0 to 2 (admin notification + claimant confirmation,
                          attempted independently)
"""

import logging
from typing import List, Optional

from vetlyst.config import Settings, settings
from vetlyst.exceptions import NotificationError
from vetlyst.models.submission import AppointmentRequest, ClinicClaim
from vetlyst.services import email_templates
from vetlyst.services.email_base import EmailSender
from vetlyst.services.resend_service import ResendEmailSender

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Error-reporting sink:
        NotificationError never escapes this class. Failures are reported
        through the log (WARNING with recipient and error context) and through
        the return value of each notify_*() method, which tests use to assert
        what was attempted.
    """

    def __init__(
        self,
        sender: EmailSender,
        appointments_from: str,
        claims_from: str,
        claims_admin_email: str,
        support_email: str,
    ):
        self.sender = sender
        self.appointments_from = appointments_from
        self.claims_from = claims_from
        self.claims_admin_email = claims_admin_email
        self.support_email = support_email

    @classmethod
    def from_settings(cls, config: Settings) -> "NotificationService":
        """Wires a Resend-backed service from an explicit Settings object."""
        sender = ResendEmailSender(
            api_key=config.resend_api_key,
            failure_threshold=config.cb_failure_threshold,
            recovery_timeout=config.cb_recovery_timeout,
        )
        return cls(
            sender=sender,
            appointments_from=config.email_from_appointments,
            claims_from=config.email_from_claims,
            claims_admin_email=config.claims_admin_email,
            support_email=config.support_email,
        )

    async def _deliver(
        self,
        from_address: str,
        to: Optional[str],
        subject: str,
        html: str,
        reply_to: Optional[str] = None,
    ) -> bool:
        """
        Attempt one send. Returns True on success, False on any failure.

        Why catch Exception (not only NotificationError): a bug in a sender
        implementation must not turn into an unhandled background-task error.
        """
        if not to:
            return False
        try:
            await self.sender.send(
                from_address=from_address,
                to=to,
                subject=subject,
                html=html,
                reply_to=reply_to,
            )
            return True
        except NotificationError as e:
            logger.warning(
                "Notification to %s not sent: %s | Context: %s", to, e.message, e.context
            )
        except Exception as e:
            error = NotificationError(
                recipient=to, context={"error_type": type(e).__name__, "error": str(e)}
            )
            logger.warning(
                "Notification to %s not sent: %s | Context: %s",
                to,
                error.message,
                error.context,
                exc_info=True,
            )
        return False

    async def notify_appointment(self, request: AppointmentRequest) -> List[str]:
        """
        Email the clinic about a new appointment request.

        Skipped (no error) when the request has no clinic email or the sender
        has no credentials. Replies go straight to the pet owner.

        Returns:
            Recipients that were successfully sent to.
        """
        if not request.clinic_email or not request.clinic_email.strip():
            logger.info("Appointment %s has no clinic email; no notification sent", request.id)
            return []
        if not self.sender.is_configured:
            logger.info("Email sender not configured; skipping notification for appointment %s", request.id)
            return []

        to = request.clinic_email.strip()
        sent = await self._deliver(
            from_address=self.appointments_from,
            to=to,
            subject=email_templates.appointment_subject(request),
            html=email_templates.appointment_clinic_html(request, self.support_email),
            reply_to=request.pet_owner_email,
        )
        if sent:
            logger.info("Appointment %s: clinic notified at %s", request.id, to)
        return [to] if sent else []

    async def notify_claim(self, claim: ClinicClaim) -> List[str]:
        """
        Email the admin inbox and confirm receipt to the claimant.

        The two sends are independent: the confirmation is still attempted
        when the admin notification fails, and vice versa.

        Returns:
            Recipients that were successfully sent to.
        """
        if not self.sender.is_configured:
            logger.info("Email sender not configured; skipping notifications for claim %s", claim.id)
            return []

        delivered: List[str] = []

        if await self._deliver(
            from_address=self.claims_from,
            to=self.claims_admin_email,
            subject=email_templates.claim_admin_subject(claim),
            html=email_templates.claim_admin_html(claim),
            reply_to=claim.claimant_email,
        ):
            delivered.append(self.claims_admin_email)

        if await self._deliver(
            from_address=self.claims_from,
            to=claim.claimant_email,
            subject=email_templates.claim_confirmation_subject(claim),
            html=email_templates.claim_confirmation_html(claim),
        ):
            delivered.append(claim.claimant_email)

        logger.info("Claim %s: %d of 2 notifications sent", claim.id, len(delivered))
        return delivered


# ── Singleton Instance ────────────────────────────────────────────────────
# Holds the Resend circuit breaker, which must be shared across requests
notification_service = NotificationService.from_settings(settings)


def get_notification_service() -> NotificationService:
    """FastAPI dependency; tests override it with a fake sender."""
    return notification_service
