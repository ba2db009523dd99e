"""Network configuration constants for QuickTestly."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
IDENTITY_COOKIE: str = "quicktestly_identity"
IDENTITY_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 30
