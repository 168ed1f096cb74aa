from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices
import logging
import structlog
from pythonjsonlogger import jsonlogger

class Settings(BaseSettings):
    app_name: str = "fleet-emergency-coordination"
    environment: str = "dev"

    database_url: str = Field(
        default="sqlite+aiosqlite:///./fleet.db",
        validation_alias=AliasChoices("DATABASE_URL", "database_url"),
    )
    auto_create_schema: bool = Field(
        default=True, validation_alias=AliasChoices("AUTO_CREATE_SCHEMA", "auto_create_schema")
    )

    # emergency contacts texted on every new incident
    police_phone: str = Field(default="+1234567890", validation_alias=AliasChoices("POLICE_PHONE", "police_phone"))
    hospital_phone: str = Field(
        default="+0987654321", validation_alias=AliasChoices("HOSPITAL_PHONE", "hospital_phone")
    )

    sms_provider: str = Field(default="auto", validation_alias=AliasChoices("SMS_PROVIDER", "sms_provider"))
    fast2sms_api_key: str = Field(
        default="", validation_alias=AliasChoices("FAST2SMS_API_KEY", "fast2sms_api_key")
    )
    fast2sms_url: str = Field(
        default="https://www.fast2sms.com/dev/bulkV2",
        validation_alias=AliasChoices("FAST2SMS_URL", "fast2sms_url"),
    )

    public_base_url: str = Field(
        default="http://localhost:8000", validation_alias=AliasChoices("PUBLIC_BASE_URL", "public_base_url")
    )
    emergency_dedup_window_seconds: int = Field(
        default=300,
        validation_alias=AliasChoices("EMERGENCY_DEDUP_WINDOW_SECONDS", "emergency_dedup_window_seconds"),
    )
    facility_radius_km: float = Field(
        default=10.0, validation_alias=AliasChoices("FACILITY_RADIUS_KM", "facility_radius_km")
    )
    upload_dir: str = Field(default="uploads", validation_alias=AliasChoices("UPLOAD_DIR", "upload_dir"))
    require_trip_credentials: bool = Field(
        default=False, validation_alias=AliasChoices("REQUIRE_TRIP_CREDENTIALS", "require_trip_credentials")
    )

    cors_origins: str = Field(default="*", validation_alias=AliasChoices("CORS_ORIGINS", "cors_origins"))

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

settings = Settings()

def setup_logging(level: int = logging.INFO) -> None:

    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter("%(levelname)s %(message)s %(name)s %(asctime)s"))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)


    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        cache_logger_on_first_use=True,
    )
