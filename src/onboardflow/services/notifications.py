"""Transactional email composition and best-effort dispatch."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from html import escape
from typing import Protocol

from onboardflow.domain.models import ProjectRecord
from onboardflow.domain.money import format_minor_units

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """An email queued for delivery after a committed change."""

    to: str
    subject: str
    html: str


class EmailSender(Protocol):
    """Interface for the outbound email provider."""

    async def send_email(self, to: str, subject: str, html: str) -> None:
        """Send a single HTML email."""


@dataclass
class NotificationService:
    """Deliver queued notifications, one attempt each."""

    sender: EmailSender

    async def send(self, notification: Notification) -> None:
        """Send one notification and let provider errors propagate."""
        await self.sender.send_email(
            to=notification.to,
            subject=notification.subject,
            html=notification.html,
        )

    async def dispatch(self, notifications: Iterable[Notification]) -> int:
        """Send each notification, logging failures. Returns the sent count."""
        sent = 0
        for notification in notifications:
            try:
                await self.send(notification)
            except Exception:
                logger.exception(
                    "Failed to send email",
                    extra={"to": notification.to, "subject": notification.subject},
                )
                continue
            sent += 1
        return sent


def magic_link_ready(photographer_email: str, url: str) -> Notification:
    link = escape(url)
    return Notification(
        to=photographer_email,
        subject="Your Magic Link is Ready!",
        html=(
            "<h2>Your Magic Link is Ready! ✨</h2>"
            "<p>I've created a magic link for your client. Just send them this:</p>"
            f'<p><a href="{link}">{link}</a></p>'
            "<p><strong>What happens next:</strong></p>"
            "<ol>"
            "<li>Client clicks link</li>"
            "<li>Client reviews and signs contract</li>"
            "<li>Client pays deposit</li>"
            "<li>You get notified (I'll email you)</li>"
            "</ol>"
            "<p>That's it! You can focus on photography now.</p>"
            "<p>Best,<br>Your Invisible Assistant</p>"
        ),
    )


def contract_signed(photographer_email: str, project: ProjectRecord) -> Notification:
    return Notification(
        to=photographer_email,
        subject="✅ Contract Signed!",
        html=(
            "<h2>Great news! Your client just signed the contract.</h2>"
            f"{_project_summary(project, amount_label='Deposit')}"
            "<p>I've automatically sent them the payment link. "
            "You'll get another email when they pay.</p>"
            "<p>No action needed from you. Just focus on the creative work! 🎨</p>"
            "<p>Best,<br>Your Invisible Assistant</p>"
        ),
    )


def payment_received(photographer_email: str, project: ProjectRecord) -> Notification:
    return Notification(
        to=photographer_email,
        subject="💰 Payment Received!",
        html=(
            "<h2>Payment Received! 🎉</h2>"
            f"{_project_summary(project, amount_label='Amount')}"
            "<p>The booking is now confirmed! "
            "Time to focus on creating amazing photos.</p>"
            "<p>Need anything else? Just reply to this email.</p>"
            "<p>Best,<br>Your Invisible Assistant</p>"
        ),
    )


def booking_confirmed(project: ProjectRecord) -> Notification:
    return Notification(
        to=project.client_email,
        subject="Booking Confirmed!",
        html=(
            "<h2>Thank you for your payment! 🎉</h2>"
            "<p>Your booking for "
            f"<strong>{escape(project.project_name)}</strong> is now confirmed.</p>"
            "<p>The photographer will be in touch with you soon "
            "to discuss next steps.</p>"
            "<p>Best regards,<br>The OnboardFlow Assistant</p>"
        ),
    )


def _project_summary(project: ProjectRecord, amount_label: str) -> str:
    return (
        f"<p><strong>Client:</strong> {escape(project.client_email)}</p>"
        f"<p><strong>Project:</strong> {escape(project.project_name)}</p>"
        f"<p><strong>{amount_label}:</strong> "
        f"{format_minor_units(project.amount)}</p>"
    )
