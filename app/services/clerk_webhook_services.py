from supabase import AsyncClient
from app.models.clerk_webhook_models import UserCreatedEvent, UserUpdatedEvent, UserDeletedEvent
from app.models.user_models import UserRecord, UserUpdate, build_display_name
from app.configs.app_settings import settings
from app.custom_error import DatabaseError, MissingUserIdError
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class ClerkWebhookService:
    """Mirror Clerk user lifecycle events into the users table"""

    def __init__(self, supabase_client: AsyncClient, users_table: Optional[str] = None):
        self.supabase_client = supabase_client
        self.users_table = users_table or settings.USERS_TABLE

    # --------------------------------------------------------------------------------------------------------------------

    async def handle_user_created(self, event: UserCreatedEvent):
        """Handle user.created webhook event"""

        user_data = event.data
        user_record = UserRecord(
            clerk_id=user_data.id,
            name=build_display_name(user_data.first_name, user_data.last_name),
            image_url=user_data.image_url,
        )

        try:
            result = await self.supabase_client.table(self.users_table).insert(user_record.model_dump()).execute()
        except Exception as e:
            logger.error(f"Error handling user.created webhook for {user_data.id}: {str(e)}")
            raise DatabaseError("Failed to sync user")

        if result.data:
            logger.info(f"✅ User created: {user_data.id}")
        else:
            logger.warning(f"⚠️ Insert returned no rows for user: {user_data.id}")

    # --------------------------------------------------------------------------------------------------------------------

    async def handle_user_updated(self, event: UserUpdatedEvent):
        """Handle user.updated webhook event, updating an unknown user is a no-op"""

        user_data = event.data
        update_data = UserUpdate(
            name=build_display_name(user_data.first_name, user_data.last_name),
            image_url=user_data.image_url,
        )

        try:
            result = (
                await self.supabase_client.table(self.users_table)
                .update(update_data.model_dump())
                .eq("clerk_id", user_data.id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error handling user.updated webhook for {user_data.id}: {str(e)}")
            raise DatabaseError("Failed to sync user")

        if result.data:
            logger.info(f"✅ User updated: {user_data.id}")
        else:
            logger.warning(f"⚠️ No user row to update for: {user_data.id}")

    # --------------------------------------------------------------------------------------------------------------------

    async def handle_user_deleted(self, event: UserDeletedEvent):
        """Handle user.deleted webhook event, deleting an unknown user is a no-op"""

        clerk_id = event.data.id
        if not clerk_id:
            raise MissingUserIdError()

        try:
            result = await self.supabase_client.table(self.users_table).delete().eq("clerk_id", clerk_id).execute()
        except Exception as e:
            logger.error(f"Error handling user.deleted webhook for {clerk_id}: {str(e)}")
            raise DatabaseError("Failed to sync user")

        if result.data:
            logger.info(f"✅ User deleted: {clerk_id}")
        else:
            logger.warning(f"⚠️ No user row to delete for: {clerk_id}")
