"""Configuration from environment."""
import os

PORT = int(os.environ.get("PORT", "8001"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# When TESTING=true, use test DB URL so tests never touch production.
if os.environ.get("TESTING") == "true":
    DATABASE_URL = os.environ.get("TESTING_DATABASE_URL", "sqlite:///:memory:")
else:
    DATABASE_URL = os.environ.get(
        "DATABASE_URL",
        "sqlite:///./bet_tracker.db",
    )

# Identity provider tokens (HS256 JWT, subject id in "sub").
JWT_SECRET = os.environ.get("JWT_SECRET", "dev-secret-change-me")
JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
# Empty string disables the audience check.
JWT_AUDIENCE = os.environ.get("JWT_AUDIENCE", "authenticated")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]

RECENT_SESSIONS_LIMIT = int(os.environ.get("RECENT_SESSIONS_LIMIT", "5"))
