"""Logging configuration helpers."""

import logging

# Client libraries that log every HTTP request at INFO.
_CHATTY_LOGGERS = ("httpx", "openai")


def configure_logging(verbose: bool = False) -> None:
    """Send package logs to stderr, keeping stdout for command output.

    Only warnings are shown by default; ``verbose`` enables debug output for
    the package and the OpenAI client stack.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger("can_i_have_this")
    logger.setLevel(level)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
