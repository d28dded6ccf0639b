"""
A minimal result type, for code that prefers returning failures to raising them.
"""

from .derive import enum_of

import attr


@attr.s(frozen=True, slots=True)
class Ok:
    value = attr.ib()

    def is_ok(self):
        return True

    def is_err(self):
        return False

    def map_err(self, func):
        return self

    def unwrap(self):
        return self.value

    def with_context(self, f, into=None):
        "Success carries no context; ``f`` is never called."
        return self


@attr.s(frozen=True, slots=True)
class Err:
    error = attr.ib()

    def is_ok(self):
        return False

    def is_err(self):
        return True

    def map_err(self, func):
        return Err(func(self.error))

    def unwrap(self):
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError("Called unwrap on Err({!r})".format(self.error))

    def with_context(self, f, into=None):
        """
        Wrap the error with the context returned by ``f``.

        ``into`` is the error enum to convert into; it defaults to the enum the error already
        belongs to.
        """
        if into is None:
            into = enum_of(self.error)
            if into is None:
                raise TypeError(
                    "Can't infer an error enum for {!r}; pass into=".format(self.error)
                )
        if getattr(into, "__context_variant__", None) is None:
            raise TypeError(
                "{} has no context variant; decorate it with string_context".format(
                    into.__qualname__
                )
            )
        return into.with_context(self, f)
