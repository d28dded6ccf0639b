"""
Interprets the arguments given to ``string_context``, either as live values (the decorator)
or as a syntax tree (the source expansion).
"""

from .derive import ErrorEnum, variant
from .errors import MalformedAttribute
from .helpers import CONTEXT_FIELDS, RESERVED_VARIANT, is_mangled, trace
from .model import ContextTemplate

import ast
import attr
from keyword import iskeyword


@attr.s(frozen=True)
class ContextAttr:
    template = attr.ib(type=ContextTemplate, factory=ContextTemplate)
    variant_name = attr.ib(type=str, default=RESERVED_VARIANT)


class _Sample(ErrorEnum):
    Error = variant("sample error")


_SAMPLE = ("sample context", _Sample.Error())


def _render_sample(template):
    "Render once against a sample context and error, so that bad lookups fail here."
    return template.text.format(*_SAMPLE, **dict(zip(CONTEXT_FIELDS, _SAMPLE)))


def interpret(args=(), kwargs=None):
    """
    Turn the decorator arguments into a ``ContextAttr``.

    Accepts no arguments (the default template) or a single string template, plus an optional
    ``variant_name`` keyword.
    """
    kwargs = dict(kwargs or {})
    trace("interpret({!r}, {!r}): start", args, kwargs)
    variant_name = kwargs.pop("variant_name", RESERVED_VARIANT)
    if kwargs:
        raise MalformedAttribute(
            "string_context got unexpected keyword arguments: {}".format(", ".join(sorted(kwargs)))
        )
    if len(args) > 1:
        raise MalformedAttribute(
            "string_context takes at most one template, got {} arguments".format(len(args))
        )
    if args and not isinstance(args[0], str):
        raise MalformedAttribute(
            "string_context expects a string template, got {!r}".format(args[0])
        )

    template = ContextTemplate(args[0]) if args else ContextTemplate()
    try:
        tuple(template.placeholders)
        _render_sample(template)
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
        raise MalformedAttribute(
            "Invalid context template {!r}: {}".format(template.text, exc)
        ) from None
    _check_variant_name(variant_name)
    return ContextAttr(template=template, variant_name=variant_name)


def _check_variant_name(name):
    if (
        not isinstance(name, str)
        or not name.isidentifier()
        or iskeyword(name)
        or is_mangled(name)
    ):
        raise MalformedAttribute("Invalid variant_name {!r}".format(name))


def interpret_node(node):
    """
    Interpret a ``string_context`` decorator expression from a syntax tree.

    Only literals are accepted; anything that would need evaluating is malformed.
    """
    if not isinstance(node, ast.Call):
        return interpret()
    args = []
    for arg in node.args:
        if isinstance(arg, ast.Starred):
            raise MalformedAttribute(
                "string_context can't take starred arguments: {}".format(ast.unparse(arg))
            )
        args.append(_literal(arg, "template"))
    kwargs = {}
    for keyword in node.keywords:
        if keyword.arg is None:
            raise MalformedAttribute(
                "string_context can't take **{}".format(ast.unparse(keyword.value))
            )
        kwargs[keyword.arg] = _literal(keyword.value, keyword.arg)
    return interpret(args, kwargs)


def _literal(node, what):
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    raise MalformedAttribute(
        "string_context expects a string literal for {}, got {}".format(what, ast.unparse(node))
    )
