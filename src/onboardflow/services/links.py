"""Magic link issuance."""

import logging
import secrets
import string
from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal

from onboardflow.domain.models import ProjectRecord
from onboardflow.domain.money import to_minor_units
from onboardflow.services.booking import ProjectRepository
from onboardflow.services.notifications import Notification, magic_link_ready
from onboardflow.services.photographers import PhotographerService

logger = logging.getLogger(__name__)

SLUG_ALPHABET = string.ascii_letters + string.digits + "_-"
SLUG_LENGTH = 10


def generate_slug(length: int = SLUG_LENGTH) -> str:
    """Return a random URL-safe slug."""
    return "".join(secrets.choice(SLUG_ALPHABET) for _ in range(length))


def client_portal_url(app_url: str, slug: str) -> str:
    """Compose the client-facing portal URL for a slug."""
    return f"{app_url.rstrip('/')}/client/{slug}"


@dataclass(frozen=True)
class IssuedLink:
    """A newly created project and its shareable URL."""

    url: str
    project: ProjectRecord
    notifications: list[Notification] = field(default_factory=list)


@dataclass
class LinkService:
    """Create projects and the magic links that address them."""

    photographer_service: PhotographerService
    project_repository: ProjectRepository
    app_url: str
    slug_factory: Callable[[], str] = generate_slug

    def issue_link(
        self,
        photographer_email: str,
        client_email: str,
        project_name: str,
        amount: Decimal,
    ) -> IssuedLink:
        """Create a pending project and return its magic link."""
        amount_minor = to_minor_units(amount)
        slug = self.slug_factory()
        photographer = self.photographer_service.ensure_photographer(
            photographer_email
        )
        project = self.project_repository.create_project(
            photographer_id=photographer.id,
            client_email=client_email,
            project_name=project_name,
            amount=amount_minor,
            magic_link=slug,
        )
        url = client_portal_url(self.app_url, slug)
        logger.info("Magic link issued", extra={"project_id": str(project.id)})
        return IssuedLink(
            url=url,
            project=project,
            notifications=[magic_link_ready(photographer.email, url)],
        )
