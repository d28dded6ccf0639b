'''
Strategies to build error enums and their values.
'''
from hypothesis import strategies as st

from enum_context import ErrorEnum, string_context, variant

from keyword import iskeyword
import os


MAX_VARIANTS = 8
_max_cp = None if os.environ.get('UNICODE_NAMES') else 0x7f
_ident_start = st.characters(whitelist_categories=['Lu'], max_codepoint=_max_cp)
_ident_tail = st.characters(whitelist_categories=['Lu', 'Ll', 'Nd'],
                            whitelist_characters="_",
                            max_codepoint=_max_cp)


@st.composite
def _idents(draw, lengths=st.integers(min_value=0, max_value=20)):
    chars = [draw(_ident_start)]
    chars.extend(draw(_ident_tail) for _ in range(draw(lengths)))
    chars = ''.join(chars)
    if iskeyword(chars):
        chars += draw(_ident_tail)
    return chars


def _make_enum(name, elems, template):
    namespace = {elem: variant("{} failed".format(elem)) for elem in elems}
    enum = type('Enum_' + name, (ErrorEnum,), namespace)
    return string_context(template)(enum)


idents = _idents()
contexts = st.text(max_size=40)
templates = st.sampled_from(["{0}", "{0}: {1}", "{1} ({0})", "{context} / {inner!r}", "fixed"])
enums = st.builds(
    _make_enum,
    idents,
    st.lists(idents, min_size=1, max_size=MAX_VARIANTS, unique=True),
    templates,
)


@st.composite
def enum_values(draw, enums=enums):
    "Draws an enum and one of its original variants."
    enum = draw(enums)
    names = [name for name in enum.__variants__ if name != enum.__context_variant__]
    return enum, getattr(enum, draw(st.sampled_from(names)))()
