"""
A small convention for declaring error enums: a closed set of exception variants, each with a
display template and optionally a causal source.

    class MyError(ErrorEnum):
        NotFound = variant("no such key {0!r}", "key")
        Io = variant("I/O error", "cause", from_=OSError)

Each declaration becomes a nested subclass, so ``MyError.NotFound("x")`` is an instance of
``MyError`` that can be raised, caught and matched with ``case MyError.NotFound(key):``.
"""

from .helpers import trace
from .model import VariantDecl

from functools import partial
from string import Formatter

_formatter = Formatter()


class variant:
    """
    Declare one case of an ``ErrorEnum`` in the class body.

    ``message`` is a ``str.format`` template: ``{0}``, ``{1}``... are the payload values in
    order, and named placeholders refer to the field names.

    ``source`` names the field (or its index) holding the error that caused this one. It is
    exposed as ``.source`` and assigned to ``__cause__``.

    ``from_`` is an exception type that converts into this variant; the variant must have
    exactly one field, which becomes the source unless another is given.
    """

    __slots__ = ("message", "fields", "source", "from_")

    def __init__(self, message, *fields, source=None, from_=None):
        if not isinstance(message, str):
            raise TypeError("variant message must be a string, got {!r}".format(message))
        if not all(isinstance(field, str) and field.isidentifier() for field in fields):
            raise TypeError("variant fields must be identifiers, got {!r}".format(fields))
        if len(set(fields)) != len(fields):
            raise TypeError("Duplicate variant fields are prohibited.")
        if from_ is not None:
            if len(fields) != 1:
                raise TypeError("from_ requires a variant with exactly one field.")
            if source is None:
                source = fields[0]
        if isinstance(source, int):
            try:
                source = fields[source]
            except IndexError:
                raise TypeError("source index {} is out of range".format(source)) from None
        if source is not None and source not in fields:
            raise TypeError("source {!r} is not one of the fields".format(source))
        _check_message(message, fields)

        self.message = message
        self.fields = fields
        self.source = source
        self.from_ = from_

    def decl(self, name):
        return VariantDecl(name=name, message=self.message, fields=self.fields, source=self.source)

    def __repr__(self):
        args = [repr(self.message)]
        args.extend(map(repr, self.fields))
        if self.source is not None:
            args.append("source={!r}".format(self.source))
        if self.from_ is not None:
            args.append("from_={}".format(self.from_.__qualname__))
        return "variant({})".format(", ".join(args))


def _check_message(message, fields):
    "Check that every placeholder in a variant message names a field."
    try:
        parsed = list(_formatter.parse(message))
    except ValueError as exc:
        raise TypeError("Invalid variant message {!r}: {}".format(message, exc)) from None
    auto = 0
    for _, field, _, _ in parsed:
        if field is None:
            continue
        head = field.split(".", 1)[0].split("[", 1)[0]
        if head in fields:
            continue
        if head == "":
            index, auto = auto, auto + 1
        elif head.isdigit():
            index = int(head)
        else:
            index = len(fields)
        if index >= len(fields):
            raise TypeError(
                "Variant message {!r} refers to {{{}}}, but the fields are {!r}".format(
                    message, field, fields
                )
            )


def _get_arg(self, index):
    return self.args[index]


def _bind(name, fields, args, kwargs):
    if len(args) > len(fields):
        raise TypeError(
            "{}() takes {} arguments but {} were given".format(name, len(fields), len(args))
        )
    values = list(args)
    for field in fields[len(args):]:
        try:
            values.append(kwargs.pop(field))
        except KeyError:
            raise TypeError("{}() missing argument {!r}".format(name, field)) from None
    if kwargs:
        raise TypeError(
            "{}() got unexpected arguments: {}".format(name, ", ".join(sorted(kwargs)))
        )
    return tuple(values)


def _is_closed(cls):
    return "__variant__" in vars(cls) or bool(getattr(cls, "__variants__", ()))


class ErrorEnum(Exception):
    """
    Base class for error enums. Subclasses declare their variants with ``variant``; once a
    class declares variants it is closed and can't be subclassed further.
    """

    __variants__ = ()
    __conversions__ = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if "__variant__" in vars(cls):
            return
        for base in cls.__bases__:
            if issubclass(base, ErrorEnum) and _is_closed(base):
                raise TypeError("Error enum {} is closed.".format(base.__qualname__))

        cls.__variants__ = ()
        cls.__conversions__ = {}
        declared = [
            (name, value) for name, value in vars(cls).items() if isinstance(value, variant)
        ]
        for name, value in declared:
            cls._declare_variant(name, value)

    @classmethod
    def _declare_variant(cls, name, value):
        "Build the subclass for one variant and attach it to the enum."
        if name in cls.__variants__:
            raise TypeError("{} already has a variant {!r}".format(cls.__qualname__, name))
        shadowed = [item for item in (name,) + value.fields if item in _BASE_NAMES]
        if shadowed:
            raise TypeError(
                "{}.{} would shadow {}".format(cls.__qualname__, name, ", ".join(shadowed))
            )

        namespace = {
            "__variant__": value,
            "__module__": cls.__module__,
            "__qualname__": "{}.{}".format(cls.__qualname__, name),
            "__match_args__": value.fields,
        }
        for index, field in enumerate(value.fields):
            namespace[field] = property(partial(_get_arg, index=index))
        built = type(name, (cls,), namespace)

        setattr(cls, name, built)
        cls.__variants__ += (name,)
        if value.from_ is not None:
            cls.__conversions__[value.from_] = built
        trace("{}: declared variant {!r}", cls.__qualname__, name)
        return built

    def __init__(self, *args, **kwargs):
        value = getattr(type(self), "__variant__", None)
        if value is None:
            raise TypeError(
                "{} is an error enum; raise one of its variants: {}".format(
                    type(self).__qualname__, ", ".join(self.__variants__)
                )
            )
        values = _bind(type(self).__qualname__, value.fields, args, kwargs)
        super().__init__(*values)
        cause = self.source
        if isinstance(cause, BaseException):
            self.__cause__ = cause

    @property
    def source(self):
        "The error that caused this one, if the variant declares one."
        value = self.__variant__
        if value.source is None:
            return None
        return self.args[value.fields.index(value.source)]

    def __str__(self):
        value = self.__variant__
        return value.message.format(*self.args, **dict(zip(value.fields, self.args)))

    def __repr__(self):
        return "{}({})".format(type(self).__qualname__, ", ".join(map(repr, self.args)))

    def __eq__(self, other):
        if not isinstance(other, ErrorEnum):
            return NotImplemented
        return type(self) is type(other) and self.args == other.args

    def __hash__(self):
        # Payloads needn't be hashable.
        return hash((type(self).__qualname__, len(self.args)))

    @classmethod
    def register_conversion(cls, typ, func=None):
        """
        Register ``func`` to convert errors of type ``typ`` (or its subclasses) into this enum.

        Usable as a decorator: ``@MyError.register_conversion(KeyError)``.
        """
        if func is None:
            return partial(cls.register_conversion, typ)
        cls.__conversions__[typ] = func
        return func

    @classmethod
    def try_convert(cls, error):
        """
        Convert ``error`` into this enum, or return None if there's no way to.

        An instance of the enum converts to itself. Otherwise registered conversions are
        searched along the error's MRO, then the error's own ``__into_error__(enum)`` hook
        is tried; it may return ``NotImplemented``.
        """
        if isinstance(error, cls):
            return error
        result = NotImplemented
        for typ in type(error).__mro__:
            func = cls.__conversions__.get(typ)
            if func is not None:
                result = func(error)
                break
        else:
            hook = getattr(error, "__into_error__", None)
            if hook is not None:
                result = hook(cls)
        if result is NotImplemented:
            return None
        if not isinstance(result, cls):
            raise TypeError(
                "Conversion of {!r} into {} returned {!r}".format(error, cls.__qualname__, result)
            )
        return result

    @classmethod
    def convert(cls, error):
        "Convert ``error`` into this enum; raises TypeError if it can't be."
        result = cls.try_convert(error)
        if result is None:
            raise TypeError("{!r} can't be converted into {}".format(error, cls.__qualname__))
        return result


_BASE_NAMES = frozenset(dir(ErrorEnum))


def enum_of(error):
    "Find the error enum an instance belongs to, or None."
    if not isinstance(error, ErrorEnum):
        return None
    for cls in type(error).__mro__:
        if "__variants__" in vars(cls) and cls.__variants__:
            return cls
    return None
