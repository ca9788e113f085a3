from supabase import acreate_client, AsyncClient
from app.configs.app_settings import settings
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# one AsyncClient per process: the app lifespan opens it, every webhook request borrows it through get_supabase_client(),
# and shutdown closes the HTTP session behind its table() queries.

_supabase_client: Optional[AsyncClient] = None


async def create_supabase_client() -> AsyncClient:
    """Open the shared Supabase client for the users table - called once from the lifespan"""

    global _supabase_client
    if _supabase_client is not None:
        return _supabase_client

    _supabase_client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    logger.info(f"Supabase client ready, syncing Clerk users into '{settings.USERS_TABLE}'")
    return _supabase_client


async def get_supabase_client() -> AsyncClient:
    """Dependency handing the shared client to the webhook service"""
    if _supabase_client is None:
        raise RuntimeError("Supabase client not initialized. Call create_supabase_client() during startup.")
    return _supabase_client


async def close_supabase_client():
    """Close the postgrest session used for table() queries and forget the client"""

    global _supabase_client
    if _supabase_client is None:
        return

    client, _supabase_client = _supabase_client, None
    # table() goes through client.postgrest, an httpx-backed AsyncPostgrestClient
    await client.postgrest.aclose()
    logger.info("Supabase client closed")
