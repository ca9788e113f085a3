from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from app.utils.supabase_client_handlers import create_supabase_client, close_supabase_client
from app.routes.clerk_webhook_routes import clerk_webhook_router
from app.configs.app_settings import settings
import logging

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # before yield = code to run during startup
    await create_supabase_client()
    logger.info("✅ Clerk User Sync API started")

    yield
    # after yield = code to run during shutdown
    await close_supabase_client()
    logger.info("✅ Clerk User Sync API stopped")


app = FastAPI(title="Clerk User Sync API", version="1.0.0", lifespan=lifespan)


# Clerk posts server-to-server, CORS only matters for the browser hitting the root endpoint
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


app.include_router(clerk_webhook_router, prefix=settings.API_V1_STR)


@app.get("/")
async def root():
    return {"message": "Welcome to Clerk User Sync API"}
