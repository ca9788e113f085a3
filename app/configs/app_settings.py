from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from svix.webhooks import Webhook

# BaseSettings from pydantic-settings pulls values from the process environment first, then from the .env file, then from defaults below.
# a required field with no value makes Settings() raise a ValidationError, so the app refuses to start instead of failing per request.


class Settings(BaseSettings):
    # Supabase
    SUPABASE_URL: str
    SUPABASE_KEY: str
    USERS_TABLE: str = "users"

    # Clerk (Svix) webhook signing secret, the "whsec_..." value from the Clerk dashboard
    # an empty value counts as missing
    CLERK_SIGNING_SECRET: str = Field(min_length=1)

    # API Settings
    API_V1_STR: str = "/api/v1"

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("CLERK_SIGNING_SECRET")
    @classmethod
    def check_signing_secret(cls, value: str) -> str:
        """The secret must decode into a Svix key ("whsec_" + base64)"""
        try:
            Webhook(value)
        except ValueError as e:  # binascii.Error is a ValueError
            raise ValueError(f"CLERK_SIGNING_SECRET is not a valid Svix signing secret: {str(e)}")
        return value

    class Config:
        # in production there is no .env file, only deployment environment variables.
        # a missing .env file is not an error, pydantic just won't load anything from it.
        env_file = ".env"
        case_sensitive = True


# module top-level code runs once per process (imports are cached in sys.modules),
# so every "from app.configs.app_settings import settings" shares this one instance.
settings = Settings()
