"""Pydantic models for the JSON API."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CreateLinkRequest(_CamelModel):
    """Magic link creation form payload."""

    photographer_email: str = Field(alias="photographerEmail", pattern=_EMAIL_PATTERN)
    client_email: str = Field(alias="clientEmail", pattern=_EMAIL_PATTERN)
    project_name: str = Field(alias="projectName", min_length=1, max_length=200)
    amount: Decimal = Field(gt=0)


class CreateLinkResponse(BaseModel):
    """Shareable portal URL for a new project."""

    url: str


class PortalProject(BaseModel):
    """Client-visible view of a project."""

    id: UUID
    project_name: str
    client_email: str
    amount: int
    deposit: str
    status: str
    contract_signed_at: datetime | None
    paid_at: datetime | None


class PortalResponse(BaseModel):
    """Project plus the portal step to display."""

    project: PortalProject
    step: int


class SignatureRequest(_CamelModel):
    """Captured signature image from the portal's drawing surface."""

    signature_data: str = Field(alias="signatureData", min_length=1)


class TransitionResponse(BaseModel):
    """Result of a client-driven transition."""

    outcome: str
    status: str
    step: int


class CheckoutResponse(BaseModel):
    """Hosted checkout URL to redirect the browser to."""

    url: str


class SignedEmailRequest(_CamelModel):
    """Request to notify a photographer that a contract was signed."""

    project_id: UUID = Field(alias="projectId")
