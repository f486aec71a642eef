"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass, field
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "relay.log"

LOGS_DIR.mkdir(parents=True, exist_ok=True)

DEFAULT_WEBHOOK_URL = "https://webhook.site/b8b1ee79-d00a-4248-808e-92ebc4226148"
DEFAULT_WEBHOOK_TIMEOUT = 10.0
DEFAULT_QUEUE_MAXSIZE = 1000
DEFAULT_DRAIN_TIMEOUT = 5.0


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value


@dataclass(frozen=True)
class RelaySettings:
    """Runtime settings for the relay."""

    webhook_url: str = DEFAULT_WEBHOOK_URL
    webhook_timeout: float = DEFAULT_WEBHOOK_TIMEOUT
    queue_maxsize: int = DEFAULT_QUEUE_MAXSIZE  # 0 means unbounded
    drain_timeout: float = DEFAULT_DRAIN_TIMEOUT
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "RelaySettings":
        """Build settings from environment variables."""
        origins = os.getenv("RELAY_CORS_ORIGINS", "*")
        return cls(
            webhook_url=os.getenv("RELAY_WEBHOOK_URL") or DEFAULT_WEBHOOK_URL,
            webhook_timeout=_env_float("RELAY_WEBHOOK_TIMEOUT", DEFAULT_WEBHOOK_TIMEOUT),
            queue_maxsize=_env_int("RELAY_QUEUE_MAXSIZE", DEFAULT_QUEUE_MAXSIZE),
            drain_timeout=_env_float("RELAY_DRAIN_TIMEOUT", DEFAULT_DRAIN_TIMEOUT),
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=_env_int("API_PORT", 3000),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )
