class Error(Exception):
    """Base class for errors raised by ua_classifier."""


class ConfigError(Error):
    """The rule table could not be loaded or compiled."""


class UninitializedError(Error, RuntimeError):
    """The shared parser was accessed before a successful ``init()``."""
