"""Rule driven user agent classification.

Typical use::

    import ua_classifier

    ua_classifier.init()
    ua = ua_classifier.parse(request_user_agent, remote_addr)
    ua.product.name, ua.os.name, ua.device.brand
"""

__all__ = [
    "CPU",
    "ConfigError",
    "DEFAULT_PATH",
    "Device",
    "Engine",
    "Error",
    "OS",
    "Parser",
    "Product",
    "RuleTable",
    "UninitializedError",
    "UserAgent",
    "get",
    "init",
    "load",
    "parse",
    "reload",
]

from .config import DEFAULT_PATH
from .errors import ConfigError, Error, UninitializedError
from .loader import RuleTable, load
from .models import CPU, OS, Device, Engine, Product, UserAgent
from .parser import Parser
from .shared import get, init, parse, reload
