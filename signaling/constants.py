import os

# -----------------------------
# Runtime configuration
# -----------------------------

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3000))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)

# Directory holding index.html / host.html / guest.html / viewer.html
STATIC_DIR = os.getenv("STATIC_DIR", "public")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

ROOM_ID_LENGTH = int(os.getenv("ROOM_ID_LENGTH", 8))

# -----------------------------
# Protocol vocabulary
# -----------------------------

# Entry pages served for each role (route path -> file in STATIC_DIR)
PAGES: dict[str, str] = {
    "/": "index.html",
    "/host": "host.html",
    "/guest": "guest.html",
    "/viewer": "viewer.html",
}

DEFAULT_GUEST_NAME = "Guest"
DEFAULT_KICK_REASON = "kicked by host"
REJECT_REASON = "host rejected"

__all__ = [
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "LOG_FILE",
    "STATIC_DIR",
    "CORS_ORIGINS",
    "ROOM_ID_LENGTH",
    "PAGES",
    "DEFAULT_GUEST_NAME",
    "DEFAULT_KICK_REASON",
    "REJECT_REASON",
]
