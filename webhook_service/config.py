import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./payments.db"
DEFAULT_CONFIRM_URL = "http://localhost:5001/confirm"
DEFAULT_CANCEL_URL = "http://localhost:5001/cancel"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    webhook_token: str
    database_url: str = DEFAULT_DATABASE_URL
    confirm_url: str = DEFAULT_CONFIRM_URL
    cancel_url: str = DEFAULT_CANCEL_URL
    notify_timeout: float = 10.0
    seed_file: str | None = None
    seed_on_startup: bool = True
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            webhook_token=os.getenv("WEBHOOK_TOKEN", ""),
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            confirm_url=os.getenv("CONFIRM_URL", DEFAULT_CONFIRM_URL),
            cancel_url=os.getenv("CANCEL_URL", DEFAULT_CANCEL_URL),
            notify_timeout=float(os.getenv("NOTIFY_TIMEOUT", "10")),
            seed_file=os.getenv("SEED_FILE") or None,
            seed_on_startup=_env_flag("SEED_ON_STARTUP", True),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
        )
