"""Tests for the Stripe webhook endpoint."""

import json

import httpx
from fastapi.testclient import TestClient

from onboardflow.api.app import create_app
from onboardflow.containers import AppContainer
from onboardflow.domain.models import BookingStatus, PhotographerRecord
from tests.conftest import (
    VALID_SIGNATURE,
    FakeEmailSender,
    InMemoryPhotographerRepository,
    InMemoryProjectRepository,
    checkout_completed_event,
    make_project,
)


def _post(
    client: TestClient, event: dict[str, object], signature: str | None
) -> httpx.Response:
    headers = {"Content-Type": "application/json"}
    if signature is not None:
        headers["Stripe-Signature"] = signature
    return client.post(
        "/api/stripe/webhook", content=json.dumps(event), headers=headers
    )


def test_checkout_completed_marks_paid_and_sends_two_emails(
    container: AppContainer,
    project_repository: InMemoryProjectRepository,
    email_sender: FakeEmailSender,
    photographer: PhotographerRecord,
) -> None:
    project = make_project(project_repository, photographer, BookingStatus.SIGNED)
    client = TestClient(create_app(container))

    response = _post(client, checkout_completed_event(project.id), VALID_SIGNATURE)

    assert response.status_code == 200
    assert response.json() == {"received": True}
    stored = project_repository.projects[project.id]
    assert stored.status is BookingStatus.PAID
    assert stored.paid_at is not None
    assert sorted(to for to, _, _ in email_sender.sent) == sorted(
        [photographer.email, project.client_email]
    )


def test_replayed_event_sends_nothing_more(
    container: AppContainer,
    project_repository: InMemoryProjectRepository,
    email_sender: FakeEmailSender,
    photographer: PhotographerRecord,
) -> None:
    project = make_project(project_repository, photographer, BookingStatus.SIGNED)
    client = TestClient(create_app(container))

    _post(client, checkout_completed_event(project.id), VALID_SIGNATURE)
    response = _post(client, checkout_completed_event(project.id), VALID_SIGNATURE)

    assert response.status_code == 200
    assert len(email_sender.sent) == 2


def test_invalid_signature_is_rejected_without_effects(
    container: AppContainer,
    project_repository: InMemoryProjectRepository,
    email_sender: FakeEmailSender,
    photographer: PhotographerRecord,
) -> None:
    project = make_project(project_repository, photographer, BookingStatus.SIGNED)
    client = TestClient(create_app(container))

    response = _post(client, checkout_completed_event(project.id), "t=1,v1=forged")

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid signature"}
    assert project_repository.projects[project.id].status is BookingStatus.SIGNED
    assert email_sender.sent == []


def test_missing_signature_header_is_rejected(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = _post(client, checkout_completed_event(None), None)

    assert response.status_code == 400


def test_other_event_types_are_acknowledged(
    container: AppContainer, email_sender: FakeEmailSender
) -> None:
    client = TestClient(create_app(container))
    event = {"id": "evt_9", "type": "customer.created", "data": {"object": {}}}

    response = _post(client, event, VALID_SIGNATURE)

    assert response.status_code == 200
    assert response.json() == {"received": True}
    assert email_sender.sent == []


def test_payment_for_unsigned_project_is_acknowledged_but_ignored(
    container: AppContainer,
    project_repository: InMemoryProjectRepository,
    email_sender: FakeEmailSender,
    photographer: PhotographerRecord,
) -> None:
    project = make_project(project_repository, photographer)
    client = TestClient(create_app(container))

    response = _post(client, checkout_completed_event(project.id), VALID_SIGNATURE)

    assert response.status_code == 200
    assert project_repository.projects[project.id].status is BookingStatus.PENDING
    assert email_sender.sent == []


def test_photographer_lookup_failure_still_acknowledges_and_confirms_client(
    container: AppContainer,
    project_repository: InMemoryProjectRepository,
    photographer_repository: InMemoryPhotographerRepository,
    email_sender: FakeEmailSender,
    photographer: PhotographerRecord,
) -> None:
    project = make_project(project_repository, photographer, BookingStatus.SIGNED)
    photographer_repository.fail_on_get_by_id = True
    client = TestClient(create_app(container))

    response = _post(client, checkout_completed_event(project.id), VALID_SIGNATURE)

    assert response.status_code == 200
    assert project_repository.projects[project.id].status is BookingStatus.PAID
    assert [to for to, _, _ in email_sender.sent] == [project.client_email]


def test_event_without_type_is_acknowledged(
    container: AppContainer, email_sender: FakeEmailSender
) -> None:
    client = TestClient(create_app(container))

    response = _post(client, {"id": "evt_10", "data": {}}, VALID_SIGNATURE)

    assert response.status_code == 200
    assert response.json() == {"received": True}
    assert email_sender.sent == []
