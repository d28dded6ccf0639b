"""
The enum-context library lets an error enum carry an ad-hoc string context without a second,
parallel error type.

Decorate an ``ErrorEnum`` with ``string_context`` and it gains a hidden variant wrapping an
error with a string, ``unwrap_context`` to peel it off again, and ``with_context`` / ``context``
to attach it lazily, to a result or to a raised exception.
"""

from .derive import ErrorEnum, variant, enum_of  # noqa
from .errors import ExpansionError, MalformedAttribute, NameCollision  # noqa
from .expand import string_context, expand_class, expanded  # noqa
from .generate import ContextGuard  # noqa
from .helpers import DEFAULT_TEMPLATE, RESERVED_VARIANT, set_trace  # noqa
from .result import Ok, Err  # noqa
from .source import expand_source, expand_file  # noqa
