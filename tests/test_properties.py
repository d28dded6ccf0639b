from hypothesis import given, settings, HealthCheck, strategies as st

from . import _strategies as _st

from enum_context import Err, Ok


@settings(suppress_health_check=[HealthCheck.too_slow], max_examples=100, deadline=None)
@given(_st.enum_values())
def test_unwrap_identity(pair):
    "Peeling an error that was never wrapped gives it back with no context."
    _, error = pair
    context, inner = error.unwrap_context()
    assert context is None
    assert inner is error


@settings(suppress_health_check=[HealthCheck.too_slow], max_examples=100, deadline=None)
@given(_st.enum_values(), _st.contexts)
def test_wrap_roundtrip(pair, context):
    enum, error = pair
    result = enum.with_context(Err(error), lambda: context)
    assert result.error.unwrap_context() == (context, error)
    assert result.error.unwrap_context()[1] is error


@settings(suppress_health_check=[HealthCheck.too_slow], max_examples=50, deadline=None)
@given(_st.enums, st.integers())
def test_ok_is_lazy(enum, value):
    calls = []
    result = enum.with_context(Ok(value), lambda: calls.append(1))
    assert result == Ok(value)
    assert calls == []


@settings(suppress_health_check=[HealthCheck.too_slow], max_examples=100, deadline=None)
@given(_st.enum_values(), _st.contexts, _st.contexts)
def test_nesting(pair, first, second):
    enum, error = pair
    result = enum.with_context(enum.with_context(Err(error), lambda: first), lambda: second)
    context, inner = result.error.unwrap_context()
    assert context == second
    assert inner.unwrap_context() == (first, error)


@settings(suppress_health_check=[HealthCheck.too_slow], max_examples=100, deadline=None)
@given(_st.enum_values(), _st.contexts)
def test_template_interpolation(pair, context):
    enum, error = pair
    wrapped = enum.with_context(Err(error), lambda: context).error
    template = type(wrapped).__variant__.message
    if "{1}" in template or "{inner}" in template:
        assert str(error) in str(wrapped)
    if "{0}" in template or "{context}" in template:
        assert context in str(wrapped)
