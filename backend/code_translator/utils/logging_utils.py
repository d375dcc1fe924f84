"""Application-wide logging setup.

Logging is configured once, from the application lifespan. Every module
uses ``logging.getLogger(__name__)``; credentials are never passed to a
logger, so no redaction happens here.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """Configure application logging.

    - Logs to stdout
    - Optionally also logs to a file
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(log_level)

    logging.basicConfig(level=log_level, handlers=handlers, format=LOG_FORMAT, force=True)

    # LiteLLM is chatty at INFO; keep its own records at WARNING and above
    logging.getLogger("LiteLLM").setLevel(max(log_level, logging.WARNING))
