"""Server configuration: reads settings from environment variables.

All settings have sensible defaults for local development.  In production
the values are typically overridden via env vars or a ``.env`` file.
"""

import os
from dataclasses import dataclass, field

# Development-only fallback; deployments must set SESSION_SECRET_KEY.
_DEV_SESSION_SECRET = "formflow-dev-secret-change-me"


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration read from environment at startup."""

    # Network
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS: comma-separated origins, or "*" for wide-open dev mode
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # Journey directory (None → bundled formflow_journeys/definitions)
    journey_dir: str | None = None

    # Logging
    log_level: str = "INFO"

    # Cookie carrying the journey session id; answers live in journey_sessions
    session_secret_key: str = _DEV_SESSION_SECRET
    session_cookie_name: str = "formflow_session"
    # Seconds; 0 means a browser-session cookie
    session_max_age: int = 14 * 24 * 60 * 60
    session_https_only: bool = False

    # Shared secret for /manage routes (None = open, for local development)
    manage_api_key: str | None = None

    @property
    def session_store_ttl(self) -> int:
        """Seconds a server-side session lives; a day for browser-session cookies."""
        return self.session_max_age or 24 * 60 * 60


def load_settings() -> ServerSettings:
    """Build settings from environment variables."""
    raw_origins = os.getenv("SERVER_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        cors_origins=origins,
        journey_dir=os.getenv("JOURNEY_DIR") or None,
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").upper(),
        session_secret_key=os.getenv("SESSION_SECRET_KEY") or _DEV_SESSION_SECRET,
        session_cookie_name=os.getenv("SESSION_COOKIE_NAME", "formflow_session"),
        session_max_age=int(os.getenv("SESSION_MAX_AGE", str(14 * 24 * 60 * 60))),
        session_https_only=os.getenv("SESSION_HTTPS_ONLY", "false").lower() == "true",
        manage_api_key=os.getenv("MANAGE_API_KEY") or None,
    )
