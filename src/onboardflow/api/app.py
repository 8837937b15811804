"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from onboardflow.api.pages import router as pages_router
from onboardflow.api.schemas import (
    CheckoutResponse,
    CreateLinkRequest,
    CreateLinkResponse,
    PortalProject,
    PortalResponse,
    SignatureRequest,
    SignedEmailRequest,
    TransitionResponse,
)
from onboardflow.app_logging import configure_logging
from onboardflow.containers import AppContainer
from onboardflow.domain.booking import TransitionOutcome, portal_step
from onboardflow.domain.models import ProjectRecord
from onboardflow.domain.money import InvalidAmountError, format_minor_units
from onboardflow.services.booking import ProjectNotFoundError, TransitionRejectedError
from onboardflow.services.payments import InvalidSignatureError


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(pages_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/links")
    async def create_link(
        payload: CreateLinkRequest, request: Request, background_tasks: BackgroundTasks
    ) -> CreateLinkResponse:
        """Create a project for a client and return its magic link."""
        state_container: AppContainer = request.app.state.container
        try:
            issued = state_container.link_service.issue_link(
                photographer_email=payload.photographer_email,
                client_email=payload.client_email,
                project_name=payload.project_name,
                amount=payload.amount,
            )
        except InvalidAmountError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except Exception as exc:
            logger.exception("Failed to create magic link")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Something went wrong. Please try again.",
            ) from exc
        background_tasks.add_task(
            state_container.notification_service.dispatch, issued.notifications
        )
        return CreateLinkResponse(url=issued.url)

    @app.get("/api/portal/{slug}")
    async def get_portal(slug: str, request: Request) -> PortalResponse:
        """Return the project behind a magic link and the step to show."""
        state_container: AppContainer = request.app.state.container
        try:
            view = state_container.booking_service.get_portal(slug)
        except ProjectNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Portal not found"
            ) from exc
        return PortalResponse(project=_portal_project(view.project), step=view.step)

    @app.post("/api/portal/{slug}/signature")
    async def submit_signature(
        slug: str,
        payload: SignatureRequest,
        request: Request,
        background_tasks: BackgroundTasks,
    ) -> TransitionResponse:
        """Store the client's signature and mark the contract signed."""
        state_container: AppContainer = request.app.state.container
        try:
            result = state_container.booking_service.submit_signature(
                slug, payload.signature_data
            )
        except ProjectNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Portal not found"
            ) from exc
        except Exception as exc:
            logger.exception("Failed to save signature", extra={"slug": slug})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error saving signature. Please try again.",
            ) from exc
        if result.outcome is TransitionOutcome.REJECTED:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="This booking can no longer be signed.",
            )
        background_tasks.add_task(
            state_container.notification_service.dispatch, result.notifications
        )
        return TransitionResponse(
            outcome=result.outcome.value,
            status=result.project.status.value,
            step=portal_step(result.project),
        )

    @app.post("/api/portal/{slug}/checkout")
    async def start_checkout(slug: str, request: Request) -> CheckoutResponse:
        """Create a hosted checkout session for the deposit."""
        state_container: AppContainer = request.app.state.container
        try:
            session = state_container.payment_service.start_checkout(slug)
        except ProjectNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Portal not found"
            ) from exc
        except TransitionRejectedError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        except Exception as exc:
            logger.exception("Failed to create checkout session", extra={"slug": slug})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error creating payment. Please try again.",
            ) from exc
        return CheckoutResponse(url=session.url)

    @app.post("/api/email/signed")
    async def email_signed(
        payload: SignedEmailRequest, request: Request
    ) -> JSONResponse:
        """Email the photographer that their client signed the contract."""
        state_container: AppContainer = request.app.state.container
        try:
            notification = state_container.booking_service.signed_notification(
                payload.project_id
            )
        except ProjectNotFoundError:
            return JSONResponse(
                {"error": "Project not found"}, status_code=status.HTTP_404_NOT_FOUND
            )
        try:
            await state_container.notification_service.send(notification)
        except Exception:
            logger.exception(
                "Email error", extra={"project_id": str(payload.project_id)}
            )
            return JSONResponse(
                {"error": "Error sending email"},
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return JSONResponse({"success": True})

    @app.post("/api/stripe/webhook")
    async def stripe_webhook(
        request: Request, background_tasks: BackgroundTasks
    ) -> dict[str, bool]:
        """Receive Stripe events and confirm paid bookings."""
        state_container: AppContainer = request.app.state.container
        body = await request.body()
        signature = request.headers.get("stripe-signature")
        try:
            result = state_container.payment_service.handle_webhook(body, signature)
        except InvalidSignatureError as exc:
            logger.warning("Webhook signature verification failed: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid signature"
            ) from exc
        except Exception as exc:
            logger.exception("Webhook processing failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Webhook processing failed",
            ) from exc
        if result is not None and result.notifications:
            background_tasks.add_task(
                state_container.notification_service.dispatch, result.notifications
            )
        return {"received": True}

    return app


def _portal_project(project: ProjectRecord) -> PortalProject:
    return PortalProject(
        id=project.id,
        project_name=project.project_name,
        client_email=project.client_email,
        amount=project.amount,
        deposit=format_minor_units(project.amount),
        status=project.status.value,
        contract_signed_at=project.contract_signed_at,
        paid_at=project.paid_at,
    )
