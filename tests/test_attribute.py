import pytest

from enum_context import attribute as at
from enum_context.errors import MalformedAttribute
from enum_context.helpers import DEFAULT_TEMPLATE, RESERVED_VARIANT

import ast


def decorator(text):
    "Parse a decorator expression."
    return ast.parse(text, mode="eval").body


def test_interpret_default():
    "Test that no arguments yield the default template."

    actual = at.interpret()
    assert actual.template.text == DEFAULT_TEMPLATE == "{0}"
    assert actual.variant_name == RESERVED_VARIANT


@pytest.mark.parametrize(
    "text",
    [
        "Custom context: {0}",
        "{1} ({0})",
        "{context}: {inner!r}",
        "{1!s:>10}",
        "{1.source}",
        "{0[0]}",
        "no placeholders",
    ],
)
def test_interpret_template(text):
    assert at.interpret((text,)).template.text == text


def test_interpret_variant_name():
    assert at.interpret((), {"variant_name": "Wrapped"}).variant_name == "Wrapped"


@pytest.mark.parametrize(
    "args,kwargs",
    [
        ((1,), {}),
        ((b"bytes",), {}),
        (("{0}", "{1}"), {}),
        ((), {"template": "{0}"}),
        (("{2}",), {}),
        (("{name}",), {}),
        (("{}",), {}),
        (("{0",), {}),
        (("}",), {}),
        ((), {"variant_name": "not valid"}),
        ((), {"variant_name": "class"}),
        ((), {"variant_name": "__Hidden"}),
        ((), {"variant_name": 3}),
    ],
)
def test_interpret_malformed(args, kwargs):
    with pytest.raises(MalformedAttribute):
        at.interpret(args, kwargs)


@pytest.mark.parametrize("text", ["{1.missing}", "{0[99]}", "{inner[0]}", "{1:>10}", "{0:d}"])
def test_interpret_bad_lookup(text):
    "Test that a template that can't render is rejected up front."

    with pytest.raises(MalformedAttribute, match="Invalid context template"):
        at.interpret((text,))


@pytest.mark.parametrize(
    "text,template,name",
    [
        ("string_context", "{0}", RESERVED_VARIANT),
        ("string_context()", "{0}", RESERVED_VARIANT),
        ("ec.string_context('Custom: {0}')", "Custom: {0}", RESERVED_VARIANT),
        ("string_context('x {1}', variant_name='Ctx')", "x {1}", "Ctx"),
    ],
)
def test_interpret_node(text, template, name):
    actual = at.interpret_node(decorator(text))
    assert actual.template.text == template
    assert actual.variant_name == name


@pytest.mark.parametrize(
    "text",
    [
        "string_context(TEMPLATE)",
        "string_context(f'{x}')",
        "string_context('a' + 'b')",
        "string_context('a', 'b')",
        "string_context(*templates)",
        "string_context(**options)",
        "string_context(variant_name=NAME)",
        "string_context(3)",
        "string_context(other='x')",
    ],
)
def test_interpret_node_malformed(text):
    with pytest.raises(MalformedAttribute):
        at.interpret_node(decorator(text))
