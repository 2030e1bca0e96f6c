"""Configuration management for the bid management service."""

from typing import List, Optional

from pydantic_settings import BaseSettings


REQUIRED_VARS = [
    "JWT_SECRET",
]

SUPABASE_VARS = [
    "SUPABASE_URL",
    "SUPABASE_KEY",
]


class Config(BaseSettings):
    """Application configuration from environment variables."""

    # Required
    jwt_secret: str

    # Storage
    storage_backend: str = "supabase"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = ["http://localhost:5173"]

    # Auth
    jwt_expires_days: int = 7
    admin_username: Optional[str] = None
    admin_password: Optional[str] = None
    admin_email: str = "admin@example.com"

    # AI completion service
    openai_api_key: Optional[str] = None
    ai_model: str = "gpt-4o"
    ai_base_url: Optional[str] = None
    ai_timeout_seconds: float = 120.0

    # Uploads
    upload_dir: str = "uploads"
    max_upload_mb: int = 10

    # Scheduling and scoring
    missed_opportunity_interval_minutes: int = 60
    scoring_weights_path: Optional[str] = None

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "case_sensitive": False, "extra": "ignore"}

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def validate_config() -> Config:
    """Load and validate configuration from environment.

    Raises ValueError with descriptive message listing ALL missing
    required variables (not just the first one).
    """
    try:
        config = Config()  # type: ignore[call-arg]
    except Exception as exc:
        missing = []
        err_str = str(exc)
        for var in REQUIRED_VARS:
            if var.lower() in err_str.lower():
                missing.append(var)
        if missing:
            names = ", ".join(missing)
            raise ValueError(
                f"Missing required environment variable(s): {names}. "
                "Please set them in your .env file or environment."
            ) from exc
        raise

    if config.storage_backend not in ("supabase", "memory"):
        raise ValueError(
            f"Unsupported STORAGE_BACKEND '{config.storage_backend}'. Use 'supabase' or 'memory'."
        )

    if config.storage_backend == "supabase":
        missing = [
            var for var in SUPABASE_VARS
            if not getattr(config, var.lower())
        ]
        if missing:
            names = ", ".join(missing)
            raise ValueError(
                f"Missing required environment variable(s): {names}. "
                "Set them or use STORAGE_BACKEND=memory."
            )

    return config


def load_config() -> Config:
    """Load configuration from environment (startup entry point)."""
    return validate_config()
