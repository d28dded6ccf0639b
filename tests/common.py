from enum_context import ErrorEnum, Err, Ok, string_context, variant


@string_context("Custom context: {0}")
class MyError(ErrorEnum):
    Error1 = variant("Error 1")
    Error2 = variant("Error 2")
    Error3 = variant("Error 3")


def callme(n):
    if n == 42:
        return Ok(n)
    elif n == 1:
        return Err(MyError.Error1())
    elif n == 2:
        return Err(MyError.Error2())
    return Err(MyError.Error3())


@string_context("{0}: {1}")
class StoreError(ErrorEnum):
    NotFound = variant("no such key {0!r}", "key")
    Io = variant("I/O error", "cause", from_=OSError)
    Limit = variant("{used} of {limit} bytes used", "used", "limit")


class Explode:
    "A thunk that blows up when it shouldn't be called."

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        raise AssertionError("Unexpected in this test.")


class Counter:
    "A thunk that counts how often it was called."

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.value
