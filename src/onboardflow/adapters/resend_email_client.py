"""Resend email API client adapter."""

from dataclasses import dataclass

import httpx

from onboardflow.services.notifications import EmailSender


@dataclass
class HttpxResendClient(EmailSender):
    """Resend client implemented with httpx."""

    api_key: str
    sender: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, api_key: str, sender: str, base_url: str = "https://api.resend.com"
    ) -> "HttpxResendClient":
        """Create a Resend client with a managed httpx session."""
        return cls(
            api_key=api_key,
            sender=sender,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
        )

    async def send_email(self, to: str, subject: str, html: str) -> None:
        """Send an email using Resend's /emails API."""
        url = f"{self.base_url.rstrip('/')}/emails"
        payload: dict[str, object] = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        response = await self.http_client.post(
            url,
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=10,
        )
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
