from fastapi import APIRouter, Request, Depends
from pydantic import ValidationError
from supabase import AsyncClient
from svix.webhooks import Webhook, WebhookVerificationError
from app.utils.supabase_client_handlers import get_supabase_client
from app.services.clerk_webhook_services import ClerkWebhookService
from app.models.clerk_webhook_models import (
    UserCreatedEvent,
    UserUpdatedEvent,
    UserDeletedEvent,
    WebhookReceivedResponse,
    parse_clerk_event,
)
from app.configs.app_settings import settings
from app.custom_error import WebhookError
import json
import logging

logger = logging.getLogger(__name__)

clerk_webhook_router = APIRouter(prefix="/users", tags=["Webhooks"])

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


async def get_clerk_webhook_service(supabase_client: AsyncClient = Depends(get_supabase_client)) -> ClerkWebhookService:
    """Dependency to get ClerkWebhookService instance"""
    return ClerkWebhookService(supabase_client)


# built once at import, the secret itself is checked by Settings so a bad value stops the app at boot
clerk_webhook_verifier = Webhook(settings.CLERK_SIGNING_SECRET)


def get_webhook_verifier() -> Webhook:
    """Dependency to get the Svix verifier bound to the Clerk signing secret"""
    return clerk_webhook_verifier


# ################################################################################################################################


@clerk_webhook_router.post("/webhook", response_model=WebhookReceivedResponse)
async def clerk_webhook(
    request: Request,
    webhook: Webhook = Depends(get_webhook_verifier),
    webhook_service: ClerkWebhookService = Depends(get_clerk_webhook_service),
):
    """Handle Clerk user webhook events"""

    svix_headers = {name: request.headers.get(name) for name in SVIX_HEADERS}
    if not all(svix_headers.values()):
        raise WebhookError("Missing Svix headers")

    # the signature covers the exact bytes Clerk sent, so verify the raw body, never a re-serialized copy
    body = await request.body()

    # verify() is only used to accept or reject, its return value differs between svix releases (parsed JSON vs None)
    try:
        webhook.verify(body, svix_headers)
    except (WebhookVerificationError, UnicodeDecodeError) as e:
        # svix decodes the body before checking the signature, a non UTF-8 body is unsigned as far as we know
        logger.error(f"❌ Webhook verification failed for {svix_headers['svix-id']}: {str(e)}")
        raise WebhookError("Invalid signature")
    except ValueError as e:
        # svix 1.x parses JSON after the signature matched
        logger.error(f"❌ Webhook body is not JSON for {svix_headers['svix-id']}: {str(e)}")
        raise WebhookError("Invalid payload")

    try:
        payload = json.loads(body)
    except ValueError as e:
        logger.error(f"❌ Webhook body is not JSON for {svix_headers['svix-id']}: {str(e)}")
        raise WebhookError("Invalid payload")

    if not isinstance(payload, dict):
        logger.error(f"❌ Webhook payload is not a JSON object for {svix_headers['svix-id']}")
        raise WebhookError("Invalid payload")

    try:
        event = parse_clerk_event(payload)
    except ValidationError as e:
        logger.error(f"❌ Webhook payload does not match event {payload.get('type')}: {str(e)}")
        raise WebhookError("Invalid payload")

    logger.info(f"🔔 Received Clerk webhook: {event.type}")

    if isinstance(event, UserCreatedEvent):
        await webhook_service.handle_user_created(event)
    elif isinstance(event, UserDeletedEvent):
        await webhook_service.handle_user_deleted(event)
    elif isinstance(event, UserUpdatedEvent):
        await webhook_service.handle_user_updated(event)
    else:
        logger.info(f"⚠️ Unhandled webhook event type: {event.type}")
        return WebhookReceivedResponse(event_type=event.type, processed=False)

    # always acknowledge so Clerk does not redeliver
    return WebhookReceivedResponse(event_type=event.type, processed=True)
