from enum_context import ErrorEnum, Err, Ok, string_context, variant

import json

"""
This example is of a configuration loader that explains what it was doing when it failed.

The loader raises ``ConfigError`` variants, or converts ``OSError`` and ``json.JSONDecodeError``
into them, and wraps every failure with the path it was reading. ``describe`` peels the
layers of context back off to render one line per layer.
"""


@string_context("{0}: {1}")
class ConfigError(ErrorEnum):
    Io = variant("I/O error: {0.strerror}", "cause", from_=OSError)
    Syntax = variant("invalid JSON at line {0.lineno}", "cause", from_=json.JSONDecodeError)
    Missing = variant("missing required key {key!r}", "key")


def load_config(path, required=()):
    with ConfigError.context(lambda: "while reading {}".format(path)):
        with open(path, encoding="utf-8") as handle:
            data = json.load(handle)
        for key in required:
            if key not in data:
                raise ConfigError.Missing(key)
    return data


def read_config(path, required=()):
    "Like ``load_config``, but returns ``Ok(data)`` or ``Err(ConfigError)``."
    try:
        with open(path, encoding="utf-8") as handle:
            result = Ok(json.load(handle))
    except (OSError, json.JSONDecodeError) as exc:
        result = Err(exc)
    else:
        missing = [key for key in required if key not in result.value]
        if missing:
            result = Err(ConfigError.Missing(missing[0]))
    return ConfigError.with_context(result, lambda: "while reading {}".format(path))


def describe(error):
    lines = []
    context, error = error.unwrap_context()
    while context is not None:
        lines.append(context)
        context, error = error.unwrap_context()
    lines.append(str(error))
    return "\n".join(lines)
