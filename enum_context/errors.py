class ExpansionError(TypeError):
    """
    Raised when an error enum can't be augmented. The class or source being expanded is
    left untouched.

    Location information is appended by ``ErrorContext`` as the error travels up through
    the expansion, so the message always reflects the outermost location known.
    """

    def __init__(self, message):
        super().__init__(message)
        self.message = message
        self.context = []

    def add_context(self, context):
        self.context.append(context)

    def __str__(self):
        if not self.context:
            return self.message
        return "{}; at {}".format(self.message, "".join(reversed(self.context)))


class MalformedAttribute(ExpansionError):
    "The ``string_context`` arguments are not a single string template."


class NameCollision(ExpansionError):
    "A name the expansion needs to add is already defined on the enum."


class ErrorContext:
    """
    Inject a location into any ``ExpansionError`` raised inside the block.

    >>> with ErrorContext('example.py:4: '):
    ...   with ErrorContext('<MyError>'):
    ...     raise MalformedAttribute('bad template')
    Traceback (most recent call last):
    enum_context.errors.MalformedAttribute: bad template; at example.py:4: <MyError>

    Inner contexts are added first, and displayed last. For simplicity, the class doesn't
    attempt to inject whitespace. Other exceptions pass through untouched.
    """

    def __init__(self, *context):
        self.context = context

    def __enter__(self):
        pass

    def __exit__(self, exc_type, exc_value, traceback):
        if isinstance(exc_value, ExpansionError):
            exc_value.add_context("".join(map(str, self.context)))


def err_ctx(context, func):
    """
    Execute a callable, decorating expansion errors raised with a location.

    ``err_ctx(context, func)`` has the same effect as:

        with ErrorContext(context):
            return func()
    """
    try:
        return func()
    except ExpansionError as exc:
        exc.add_context(context)
        raise
