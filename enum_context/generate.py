"""
The routines added to an augmented error enum.

Like rules in a ruleset, each routine rule takes a verb and returns the routine in the form
that verb needs: a function to attach to a live class (``RUNTIME``) or source text to splice
into a class body (``SOURCE``).
"""

from .errors import NameCollision
from .helpers import MODULE_ALIAS, RUNTIME, SOURCE, trace
from .model import GeneratedArtifacts
from .result import Err, Ok

from textwrap import dedent


def _wrap(enum, inner, context):
    return getattr(enum, enum.__context_variant__)(context, inner)


def unwrap_context(self):
    """
    Peel the context off this error.

    Returns ``(context, inner)`` for an error wrapped with context and ``(None, self)`` for
    any other variant.
    """
    if isinstance(self, getattr(type(self), self.__context_variant__)):
        context, inner = self.args
        return context, inner
    return None, self


def with_context(cls, result, f):
    """
    Attach the context returned by ``f`` to a failed result.

    ``Ok`` comes back unchanged and ``f`` is not called. ``Err(error)`` becomes
    ``Err(wrapped)``, where ``error`` is converted into this enum first.
    """
    if isinstance(result, Ok):
        return result
    if not isinstance(result, Err):
        raise TypeError("with_context expects Ok or Err, got {!r}".format(result))
    context = str(f())
    return Err(_wrap(cls, cls.convert(result.error), context))


class ContextGuard:
    """
    Wrap exceptions that convert into ``enum`` with the context returned by ``f``.

    >>> with MyError.context(lambda: 'while reading {}'.format(path)):
    ...     read(path)

    If the block finishes normally, ``f`` is never called. Exceptions that don't convert
    pass through untouched.
    """

    __slots__ = ("enum", "f")

    def __init__(self, enum, f):
        self.enum = enum
        self.f = f

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if not isinstance(exc_value, Exception):
            return False
        inner = self.enum.try_convert(exc_value)
        if inner is None:
            return False
        raise _wrap(self.enum, inner, str(self.f()))


def context(cls, f):
    "Wrap exceptions raised in the block with the context returned by ``f``."
    return ContextGuard(cls, f)


_UNWRAP_CONTEXT = '''
def unwrap_context(self):
    """Peel the context off this error: (context, inner) if wrapped, else (None, self)."""
    if isinstance(self, type(self).{variant}):
        context, inner = self.args
        return context, inner
    return None, self
'''

_WITH_CONTEXT = '''
@classmethod
def with_context(cls, result, f):
    """Attach the context returned by f to a failed result; f is only called on failure."""
    if isinstance(result, {module}.Ok):
        return result
    if not isinstance(result, {module}.Err):
        raise TypeError("with_context expects Ok or Err, got {{!r}}".format(result))
    context = str(f())
    return {module}.Err(cls.{variant}(context, cls.convert(result.error)))
'''

_CONTEXT = '''
@classmethod
def context(cls, f):
    """Wrap exceptions raised in the block with the context returned by f."""
    return {module}.ContextGuard(cls, f)
'''


def unwrap_context_rule(verb, definition, variant, module=MODULE_ALIAS):
    if verb == RUNTIME:
        return unwrap_context
    elif verb == SOURCE:
        return dedent(_UNWRAP_CONTEXT).format(variant=variant.name)


def with_context_rule(verb, definition, variant, module=MODULE_ALIAS):
    if verb == RUNTIME:
        return classmethod(with_context)
    elif verb == SOURCE:
        return dedent(_WITH_CONTEXT).format(variant=variant.name, module=module)


def context_rule(verb, definition, variant, module=MODULE_ALIAS):
    if verb == RUNTIME:
        return classmethod(context)
    elif verb == SOURCE:
        return dedent(_CONTEXT).format(module=module)


ROUTINES = (
    ("unwrap_context", unwrap_context_rule),
    ("with_context", with_context_rule),
    ("context", context_rule),
)


def generate(verb, definition, variant, template, routines=ROUTINES, module=MODULE_ALIAS):
    """
    Build the routines for an augmented definition.

    Raises NameCollision if the enum already defines a routine name, or if a variant has a
    payload field by that name, since the field would hide the routine on that variant.
    """
    trace("generate({!s}, {}): start", verb, definition.name)
    fields = {
        field: decl.name
        for decl in definition.variants
        if decl is not variant
        for field in decl.fields
    }
    for name, _ in routines:
        if name in definition.members:
            raise NameCollision("{} already defines {!r}".format(definition.name, name))
        if name in fields:
            raise NameCollision(
                "{}.{} has a field named {!r}".format(definition.name, fields[name], name)
            )

    emitted = []
    for name, rule in routines:
        routine = rule(verb=verb, definition=definition, variant=variant, module=module)
        if routine is None:
            raise ValueError("No {} routine for verb {!r}".format(name, verb))
        emitted.append((name, routine))
    trace("generate({!s}, {}): emitted {}", verb, definition.name, [name for name, _ in emitted])
    return GeneratedArtifacts(
        definition=definition, variant=variant, template=template, routines=emitted
    )
