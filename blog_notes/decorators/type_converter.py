"""Convert string arguments to the types a tool declares.

Some MCP clients send every argument as a string ("42", "true"). Values for
int, float and bool parameters are converted before the tool runs.
"""

import functools
import inspect
import typing
from typing import Any, Callable

from blog_notes.errors import ValidationError

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off", ""}


def _to_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValidationError(f"Parameter '{name}' must be true or false, got '{value}'")


def _to_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise ValidationError(f"Parameter '{name}' must be an integer, got '{value}'") from None


def _to_float(name: str, value: str) -> float:
    try:
        return float(value.strip())
    except ValueError:
        raise ValidationError(f"Parameter '{name}' must be a number, got '{value}'") from None


_CONVERTERS = {bool: _to_bool, int: _to_int, float: _to_float}


def convert_value(name: str, value: Any, target: Any) -> Any:
    converter = _CONVERTERS.get(target)
    if converter is None or not isinstance(value, str):
        return value
    return converter(name, value)


def type_converter(func: Callable) -> Callable:
    signature = inspect.signature(func)
    hints = typing.get_type_hints(func)

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        bound = signature.bind_partial(*args, **kwargs)
        for name, value in list(bound.arguments.items()):
            bound.arguments[name] = convert_value(name, value, hints.get(name))
        return await func(*bound.args, **bound.kwargs)

    return wrapper
