"""
Vetlyst Backend — Abstract Email Sender Interface
===================================================

What:  Abstract base class for transactional email providers.
Why:   NotificationService only needs "send(from, to, subject, html)". Keeping
       the provider behind this interface lets tests plug in a fake that
       records or raises, and keeps Resend specifics out of the workflow.
How:   Concrete implementations inherit from EmailSender and implement send().

Implementations:
    - ResendEmailSender: Resend transactional email API (default)
"""

from abc import ABC, abstractmethod
from typing import Optional


class EmailSender(ABC):
    """
    Contract:
        - send() dispatches exactly one message and returns the provider's
          message id (or an empty string when the provider returns none)
        - Every provider failure is raised as NotificationError
        - Implementations never retry; notifications are at-most-once
    """

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """False when credentials are missing; callers skip sending entirely."""
        ...

    @abstractmethod
    async def send(
        self,
        from_address: str,
        to: str,
        subject: str,
        html: str,
        reply_to: Optional[str] = None,
    ) -> str:
        """
        Send one HTML email.

        Raises:
            NotificationError: the provider rejected the message or was
                unreachable, or the sender's circuit is open.
        """
        ...

    @abstractmethod
    def status(self) -> str:
        """Health summary: available, not_configured, or circuit_open."""
        ...
