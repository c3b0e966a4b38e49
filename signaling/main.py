import uvicorn

from .constants import HOST, LOG_FILE, LOG_LEVEL, PORT
from .logging_config import get_logger, setup_logging


def run() -> None:
    setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
    logger = get_logger(__name__)
    logger.info(f"Server running on port {PORT}")
    uvicorn.run("signaling.app:app", host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    run()
