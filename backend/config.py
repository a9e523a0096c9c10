import os

# Session token configuration
# In production, set SECRET_KEY environment variable to a secure random value
SECRET_KEY = os.getenv(
    "SECRET_KEY",
    "dev-secret-key-change-in-production-abc123xyz789"  # Default for development only
)
ALGORITHM = "HS256"
SESSION_EXPIRE_DAYS = int(os.getenv("SESSION_EXPIRE_DAYS", "7"))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "session")
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"

# Identity provider (OpenID-style) ID token verification
OIDC_SIGNING_KEY = os.getenv("OIDC_SIGNING_KEY", "dev-oidc-signing-key")
OIDC_ALGORITHMS = [
    alg.strip() for alg in os.getenv("OIDC_ALGORITHMS", "HS256").split(",") if alg.strip()
]
OIDC_CLIENT_ID = os.getenv("OIDC_CLIENT_ID", "devicewatch")
OIDC_ISSUER = os.getenv("OIDC_ISSUER") or None

# Command lifecycle
COMMAND_EXECUTION_DELAY_SECONDS = float(os.getenv("COMMAND_EXECUTION_DELAY_SECONDS", "2"))

# Rate limiting
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
COMMAND_RATE_LIMIT = os.getenv("COMMAND_RATE_LIMIT", "30/minute")
SESSION_RATE_LIMIT = os.getenv("SESSION_RATE_LIMIT", "10/minute")

# Settings defaults
DEFAULT_TRACKING_INTERVAL = 15  # minutes
MAX_TRACKING_INTERVAL = 24 * 60  # minutes

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173",
    ).split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
