# config/settings.py
import os
import sys
from typing import Optional
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")

    # Management endpoint
    SPLUNK_HOST: str = Field(default="localhost", validation_alias="SPLUNK_HOST")
    SPLUNK_PORT: int = Field(default=8089, validation_alias="SPLUNK_PORT")
    SPLUNK_SCHEME: str = Field(default="https", validation_alias="SPLUNK_SCHEME")
    SPLUNK_USERNAME: Optional[str] = Field(default=None, validation_alias="SPLUNK_USERNAME")
    SPLUNK_PASSWORD: Optional[str] = Field(default=None, validation_alias="SPLUNK_PASSWORD")
    # splunkd ships with a self-signed certificate
    SPLUNK_VERIFY_TLS: bool = Field(default=False, validation_alias="SPLUNK_VERIFY_TLS")
    HTTP_TIMEOUT_SECONDS: float = Field(default=30.0, validation_alias="HTTP_TIMEOUT_SECONDS")

    # Restart polling
    RESTART_TIMEOUT_SECONDS: float = Field(
        default=180.0, validation_alias="RESTART_TIMEOUT_SECONDS"
    )
    RESTART_DRAIN_SHARE: float = Field(
        default=0.5, gt=0.0, le=1.0, validation_alias="RESTART_DRAIN_SHARE"
    )
    RESTART_PROBE_INTERVAL_SECONDS: float = Field(
        default=0.01, validation_alias="RESTART_PROBE_INTERVAL_SECONDS"
    )
    RESTART_READY_INTERVAL_SECONDS: float = Field(
        default=0.1, validation_alias="RESTART_READY_INTERVAL_SECONDS"
    )
    PROBE_CONNECT_TIMEOUT_SECONDS: float = Field(
        default=1.0, validation_alias="PROBE_CONNECT_TIMEOUT_SECONDS"
    )

    # Not-ready retry loops (jobs)
    NOT_READY_MAX_ATTEMPTS: int = Field(
        default=20, ge=1, validation_alias="NOT_READY_MAX_ATTEMPTS"
    )
    NOT_READY_DELAY_SECONDS: float = Field(
        default=0.5, validation_alias="NOT_READY_DELAY_SECONDS"
    )

    # Logging knobs
    LOGGER_NAME: str = "splunkrest"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="splunkrest.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=10 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
