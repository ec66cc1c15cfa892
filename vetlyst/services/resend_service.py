"""
Vetlyst Backend — Resend Email Sender
=======================================

What:  EmailSender implementation backed by the Resend transactional email API.
Why:   Resend is the provider the directory's sending domain is verified with.
How:   Wraps the synchronous `resend.Emails.send` call in a worker thread so the
       event loop is never blocked, and guards it with a circuit breaker.
Who:   Constructed once from Settings in `vetlyst.services.notification_service`.
When:  Called from FastAPI background tasks after a submission is committed.

Resilience Strategy:
    There are NO retries: a failed notification is logged and dropped.
    The circuit breaker only decides whether to try at all. When Resend has
    failed `failure_threshold` times in a row, sends are refused immediately
    for `recovery_timeout` seconds instead of each background task waiting on
    a provider that is known to be down.
"""

import logging
import time
from typing import Any, Dict, Optional

import resend
from starlette.concurrency import run_in_threadpool

from vetlyst.exceptions import NotificationError
from vetlyst.services.email_base import EmailSender

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Circuit Breaker
# ══════════════════════════════════════════════════════════════════════════

class CircuitBreaker:
    """
    State Machine:
        CLOSED (normal operation)
            → On failure: increment failure_count
            → When failure_count >= threshold: transition to OPEN

        OPEN (refusing sends)
            → can_execute() raises NotificationError immediately
            → After recovery_timeout seconds: transition to HALF_OPEN

        HALF_OPEN (testing recovery)
            → Allow ONE trial send through; concurrent sends are refused
              until that trial records success or failure
            → On success: CLOSED (reset failure_count)
            → On failure: back to OPEN (reset timer)

    Thread Safety:
        Plain counters. Safe for a single async worker process; each uvicorn
        worker keeps its own breaker.
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(self, failure_threshold: int = 5, recovery_timeout: int = 60):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time: Optional[float] = None
        self.trial_in_flight = False

    def can_execute(self) -> bool:
        """
        Returns:
            True if a send may proceed (CLOSED, or the single HALF_OPEN trial).

        Raises:
            NotificationError if the circuit is OPEN and still cooling down,
            or HALF_OPEN with the trial send still outstanding.
        """
        if self.state == self.CLOSED:
            return True

        if self.state == self.OPEN:
            elapsed = time.time() - (self.last_failure_time or 0)
            if elapsed >= self.recovery_timeout:
                logger.info("Email circuit breaker transitioning to HALF_OPEN after %.1fs", elapsed)
                self.state = self.HALF_OPEN
                self.trial_in_flight = True
                return True
            remaining = int(self.recovery_timeout - elapsed)
            raise NotificationError(
                message="Email sending is paused after repeated provider failures",
                context={"circuit": self.state, "retry_in_seconds": remaining},
            )

        if self.trial_in_flight:
            raise NotificationError(
                message="Email sending is paused while a recovery test send is in flight",
                context={"circuit": self.state},
            )
        self.trial_in_flight = True
        return True

    def record_success(self) -> None:
        if self.state == self.HALF_OPEN:
            logger.info("Email circuit breaker transitioning to CLOSED (provider recovered)")
        self.failure_count = 0
        self.state = self.CLOSED
        self.last_failure_time = None
        self.trial_in_flight = False

    def record_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = time.time()
        self.trial_in_flight = False

        if self.state == self.HALF_OPEN:
            logger.warning("Email circuit breaker returning to OPEN (test send failed)")
            self.state = self.OPEN
        elif self.failure_count >= self.failure_threshold:
            logger.warning(
                "Email circuit breaker OPENING after %d consecutive failures",
                self.failure_count,
            )
            self.state = self.OPEN


# ══════════════════════════════════════════════════════════════════════════
# Resend Sender
# ══════════════════════════════════════════════════════════════════════════

class ResendEmailSender(EmailSender):
    """
    Sends HTML email through Resend.

    Error Handling Chain:
        circuit open → NotificationError (no API call)
        resend raises → record failure → NotificationError
        success → record success → message id
    """

    def __init__(
        self,
        api_key: str,
        failure_threshold: int = 5,
        recovery_timeout: int = 60,
    ):
        self._api_key = api_key
        # The Resend SDK authenticates through module state
        if api_key:
            resend.api_key = api_key

        self.circuit_breaker = CircuitBreaker(
            failure_threshold=failure_threshold,
            recovery_timeout=recovery_timeout,
        )
        logger.info(
            "ResendEmailSender initialized (configured=%s, circuit_breaker(threshold=%d, recovery=%ds))",
            self.is_configured,
            failure_threshold,
            recovery_timeout,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def send(
        self,
        from_address: str,
        to: str,
        subject: str,
        html: str,
        reply_to: Optional[str] = None,
    ) -> str:
        if not self.is_configured:
            raise NotificationError(message="RESEND_API_KEY is not configured", recipient=to)

        self.circuit_breaker.can_execute()

        params: Dict[str, Any] = {
            "from": from_address,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        if reply_to:
            params["reply_to"] = reply_to

        start_time = time.perf_counter()
        try:
            response = await run_in_threadpool(resend.Emails.send, params)
        except Exception as e:
            self.circuit_breaker.record_failure()
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.warning("Resend send to %s failed after %.0fms: %s", to, duration_ms, str(e))
            raise NotificationError(
                message="Email provider rejected or did not accept the message",
                recipient=to,
                context={"error_type": type(e).__name__, "error": str(e)},
            ) from e

        self.circuit_breaker.record_success()
        message_id = ""
        if isinstance(response, dict):
            message_id = str(response.get("id", ""))
        logger.info(
            "Email sent to %s in %.0fms (id=%s)",
            to,
            (time.perf_counter() - start_time) * 1000,
            message_id or "unknown",
        )
        return message_id

    def status(self) -> str:
        if not self.is_configured:
            return "not_configured"
        if self.circuit_breaker.state == CircuitBreaker.OPEN:
            return "circuit_open"
        return "available"
