from pydantic import BaseModel
from typing import Dict, Any, Optional, Literal, Type


class ClerkUserData(BaseModel):
    """User fields we sync from a Clerk user payload, other provider fields are ignored"""

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = None


class ClerkDeletedObjectData(BaseModel):
    """Clerk sends a trimmed object for deletions, the id can be missing"""

    id: Optional[str] = None
    deleted: Optional[bool] = None


class ClerkWebhookEvent(BaseModel):
    """Envelope shared by every Clerk webhook event"""

    type: str
    object: Optional[str] = None
    timestamp: Optional[int] = None


class UserCreatedEvent(ClerkWebhookEvent):
    type: Literal["user.created"]
    data: ClerkUserData


class UserUpdatedEvent(ClerkWebhookEvent):
    type: Literal["user.updated"]
    data: ClerkUserData


class UserDeletedEvent(ClerkWebhookEvent):
    type: Literal["user.deleted"]
    data: ClerkDeletedObjectData


class UnhandledClerkEvent(ClerkWebhookEvent):
    """Any event type we don't sync, only the type string is required"""

    object: Any = None
    timestamp: Any = None
    data: Any = None


# event type -> model. anything not listed here falls back to UnhandledClerkEvent.
CLERK_EVENT_MODELS: Dict[str, Type[ClerkWebhookEvent]] = {
    "user.created": UserCreatedEvent,
    "user.updated": UserUpdatedEvent,
    "user.deleted": UserDeletedEvent,
}


def parse_clerk_event(payload: Dict[str, Any]) -> ClerkWebhookEvent:
    """Build the typed event matching payload["type"].

    Raises pydantic.ValidationError when the payload does not fit the chosen model.
    """
    event_type = payload.get("type")
    event_model = CLERK_EVENT_MODELS.get(event_type, UnhandledClerkEvent) if isinstance(event_type, str) else UnhandledClerkEvent
    return event_model.model_validate(payload)


class WebhookReceivedResponse(BaseModel):
    """Response model for webhook processing"""

    status: str = "success"
    message: str = "Webhook received"
    event_type: Optional[str] = None
    processed: bool = False  # True when a store mutation was issued
