from .errors import NameCollision
from .helpers import RESERVED_VARIANT, trace
from .model import ContextVariant


def inject(definition, template, name=RESERVED_VARIANT):
    """
    Append the context variant to an error enum definition.

    Returns the augmented definition and the new variant. Every existing variant and
    attribute is carried through in order.
    """
    trace("inject({}, {!r}): start", definition.name, name)
    if name in definition.variant_names or name in definition.members:
        raise NameCollision(
            "{} already defines {!r}; pass variant_name= to string_context to use "
            "another name".format(definition.name, name)
        )
    added = ContextVariant(name=name, template=template)
    augmented = definition.with_variant(added)
    trace("inject({}, {!r}): variants {}", definition.name, name, augmented.variant_names)
    return augmented, added
