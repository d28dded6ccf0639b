import logging

logger = logging.getLogger("enum_context")

TRACE = 5
RUNTIME = "runtime"
SOURCE = "source"
DEFAULT_TEMPLATE = "{0}"
RESERVED_VARIANT = "_WithContext"
CONTEXT_FIELDS = ("context", "inner")
MODULE_ALIAS = "_enum_context"


def trace(fmt, *args, _logger=logger, _TRACE=TRACE):
    "Trace a log message. Avoids issues with applications setting `style`."
    if _logger.isEnabledFor(_TRACE):
        _logger.log(_TRACE, fmt.format(*args))


def set_trace(enabled=True):
    logger.setLevel(TRACE if enabled else logging.WARNING)


def visibility_of(name):
    return "private" if name.startswith("_") else "public"


def is_mangled(name):
    """
    Python rewrites ``__name`` inside a class body to ``_Class__name``; such a name can't
    be used for a variant that generated code refers to.
    """
    return name.startswith("__") and not name.endswith("__")
