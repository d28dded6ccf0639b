"""
The import-time expansion: ``string_context`` rewrites a live ``ErrorEnum`` subclass.
"""

from .attribute import ContextAttr, interpret
from .derive import ErrorEnum, variant
from .errors import ErrorContext, ExpansionError
from .generate import generate
from .helpers import RUNTIME, trace, visibility_of
from .inject import inject
from .model import ErrorEnumDefinition

from functools import partial


def definition_from_class(cls):
    "Describe a live error enum."
    return ErrorEnumDefinition(
        name=cls.__name__,
        visibility=visibility_of(cls.__name__),
        attributes=(base.__qualname__ for base in cls.__bases__),
        variants=(getattr(cls, name).__variant__.decl(name) for name in cls.__variants__),
        members=dir(cls),
    )


def emit_runtime(cls, artifacts):
    added = artifacts.variant
    cls._declare_variant(
        added.name, variant(added.message, *added.fields, source=added.source)
    )
    cls.__context_variant__ = added.name
    for name, routine in artifacts.routines:
        setattr(cls, name, routine)
    return cls


def _location(cls):
    return (getattr(cls, "__module__", "?"), ": <", getattr(cls, "__qualname__", cls), ">")


def check_enum(cls):
    "Raise ExpansionError unless ``cls`` is an error enum that string_context can augment."
    if (
        not isinstance(cls, type)
        or not issubclass(cls, ErrorEnum)
        or cls is ErrorEnum
        or "__variant__" in vars(cls)
    ):
        raise ExpansionError(
            "string_context can only be applied to an ErrorEnum subclass, not {!r}".format(cls)
        )


def expanded(cls):
    """
    Class decorator left in place of ``string_context`` by the source expansion.

    The expanded class body already holds the variant and routines; this only repeats the
    check the import-time decorator makes, since the bases can't be resolved from source.
    """
    with ErrorContext(*_location(cls)):
        check_enum(cls)
    return cls


def expand_class(cls, attribute=None):
    """
    Add the context variant and its routines to an error enum, in place.

    Nothing is modified if the expansion fails.
    """
    attribute = attribute or ContextAttr()
    with ErrorContext(*_location(cls)):
        check_enum(cls)
        trace("expand_class({}): start", cls.__qualname__)
        definition = definition_from_class(cls)
        augmented, added = inject(definition, attribute.template, attribute.variant_name)
        artifacts = generate(RUNTIME, augmented, added, attribute.template)
    emit_runtime(cls, artifacts)
    trace("expand_class({}): done", cls.__qualname__)
    return cls


def string_context(*args, **kwargs):
    """
    Class decorator that lets an error enum carry a string context.

        @string_context("{0}: {1}")
        class MyError(ErrorEnum):
            ...

    It adds a hidden variant holding ``(context, inner)``, rendered with the template where
    ``{0}`` is the context and ``{1}`` the wrapped error, plus ``unwrap_context``,
    ``with_context`` and ``context``. The template defaults to ``"{0}"``.

    Also usable bare, as ``@string_context``.
    """
    if len(args) == 1 and not kwargs and isinstance(args[0], type):
        return expand_class(args[0])
    return partial(expand_class, attribute=interpret(args, kwargs))
