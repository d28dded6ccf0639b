"""
The structural description of an error enum, shared by the import-time and build-time
expansions.

Nothing in here refers to a live class or a syntax tree: the backends reduce their input to
these values, the pipeline rewrites them, and the backends emit the result.
"""

from .helpers import CONTEXT_FIELDS, DEFAULT_TEMPLATE

import attr
from string import Formatter

_formatter = Formatter()
_PLACEHOLDERS = {"0": 0, "1": 1, "context": 0, "inner": 1}


@attr.s(frozen=True)
class VariantDecl:
    """
    One case of an error enum.

    Fields:
      name: the variant name
      message: the display template, or None if it isn't known statically
      fields: names of the payload values, in order
      source: the name of the field holding the causal source, if any
    """

    name = attr.ib(type=str)
    message = attr.ib(default=None)
    fields = attr.ib(type=tuple, default=(), converter=tuple)
    source = attr.ib(default=None)


@attr.s(frozen=True)
class ContextTemplate:
    """
    The display template of the context variant.

    ``{0}`` (or ``{context}``) is the context string and ``{1}`` (or ``{inner}``) is the
    wrapped error.
    """

    text = attr.ib(type=str, default=DEFAULT_TEMPLATE)

    @property
    def placeholders(self):
        "Yields the positional index of every placeholder; raises ValueError if unknown."
        for _, field, _, _ in _formatter.parse(self.text):
            if field is None:
                continue
            head = field.split(".", 1)[0].split("[", 1)[0]
            if head not in _PLACEHOLDERS:
                raise ValueError("Unknown placeholder {{{}}}".format(field))
            yield _PLACEHOLDERS[head]


@attr.s(frozen=True)
class ContextVariant:
    """
    The variant synthesized by the expansion: an error wrapped with a string.
    """

    name = attr.ib(type=str)
    template = attr.ib(type=ContextTemplate)
    fields = CONTEXT_FIELDS
    source = CONTEXT_FIELDS[1]

    @property
    def message(self):
        return self.template.text


@attr.s(frozen=True)
class ErrorEnumDefinition:
    """
    An error enum under transformation.

    Fields:
      name: the class name
      visibility: "public" or "private"
      attributes: decorators and bases, kept verbatim
      variants: VariantDecl (or ContextVariant) instances, in declaration order
      members: every name bound in the class body
    """

    name = attr.ib(type=str)
    visibility = attr.ib(type=str, default="public")
    attributes = attr.ib(type=tuple, default=(), converter=tuple)
    variants = attr.ib(type=tuple, default=(), converter=tuple)
    members = attr.ib(type=frozenset, default=frozenset(), converter=frozenset)

    @property
    def variant_names(self):
        return tuple(variant.name for variant in self.variants)

    def with_variant(self, variant):
        return attr.evolve(
            self,
            variants=self.variants + (variant,),
            members=self.members | {variant.name},
        )


@attr.s(frozen=True)
class GeneratedArtifacts:
    """
    The output of one expansion.

    ``routines`` pairs each generated routine name with its emitted form: a function for
    the runtime verb, source text for the source verb.
    """

    definition = attr.ib(type=ErrorEnumDefinition)
    variant = attr.ib(type=ContextVariant)
    template = attr.ib(type=ContextTemplate)
    routines = attr.ib(type=tuple, default=(), converter=tuple)

    def routine(self, name):
        for key, value in self.routines:
            if key == name:
                return value
        raise KeyError(name)
