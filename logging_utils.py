import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_LEVEL = logging.INFO


def configure_logging(level: int = DEFAULT_LOG_LEVEL) -> None:
    """Configure the root logger with a shared format and level."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def log_generation(msg: str, session_id: str, logger_name: str) -> None:
    """
    Log a generation step tagged with the studio session it belongs to.

    Args:
        msg: Description of the step being traced.
        session_id: Studio session identifier.
        logger_name: Name of the logger to emit through (pass __name__ from caller).
    """
    logger = logging.getLogger(logger_name)
    logger.info(f"[session={session_id}] {msg}")
