"""The process-wide parser.

``init()`` builds it once, however many threads call it concurrently.
``get()`` does not build anything: it returns the published parser, waits
for an ``init()`` which is in progress, and otherwise raises
``UninitializedError``. Once published, reading the parser takes no lock.

``reload()`` builds a whole new table and swaps it in; tables are never
modified in place, so parses running during a reload finish against the
table they started with.
"""

from __future__ import annotations

import logging
import os
import threading

from .errors import UninitializedError
from .models import UserAgent
from .parser import Parser

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_parser: Parser | None = None


def init(path: str | os.PathLike[str] | None = None) -> Parser:
    """Build and publish the shared parser, if that has not been done yet.

    ``path`` only matters on the first successful call. Raises
    ``ConfigError`` if the rules cannot be loaded, in which case nothing is
    published and a later call will try again.
    """
    global _parser

    if (parser := _parser) is not None:
        return parser

    with _lock:
        if _parser is None:
            _parser = Parser.from_path(path)
        else:
            logger.debug("user agent parser already initialized")
        return _parser


def get() -> Parser:
    if (parser := _parser) is not None:
        return parser

    # an init() may be in progress, wait for it to finish
    with _lock:
        parser = _parser
    if parser is None:
        raise UninitializedError("ua_classifier.init() has not been called")
    return parser


def reload(path: str | os.PathLike[str] | None = None) -> Parser:
    """Replace the shared parser with one built from a fresh load.

    If the load fails the current parser stays published.
    """
    global _parser

    with _lock:
        parser = Parser.from_path(path)
        _parser = parser
    logger.info("user agent parser reloaded")
    return parser


def parse(agent: str, ip: str) -> UserAgent:
    return get().parse(agent, ip)
