"""Value normalizer — maps arbitrary Python values onto JSON-safe values.

The normalizer is called once per field while a record is serialized, and
again on anything it returns, so every transform must produce a value that is
either final (a string, number, ...) or a plain dict/list the serializer can
walk into.

Rules are checked in order and the first match wins:

    error         BaseException          -> {"message", "name", "stack"}
    typed_array   array.array            -> "Int16Array(8)"
    buffer        bytes/bytearray/mmap   -> "ArrayBuffer"
    date          datetime/date/time     -> ISO-8601 text
    pattern       re.Pattern             -> "/pattern/flags"
    weak_map      WeakKey/WeakValueDict  -> "WeakMap"
    weak_set      weakref.WeakSet        -> "WeakSet"
    map           other Mappings         -> dict with text keys
    set           collections.abc.Set    -> list
    promise       futures, awaitables    -> "Promise"
    data_view     memoryview             -> "DataView"
    callable      functions, classes     -> "name(a, b=1)"
    textual       Decimal, UUID, Enum... -> str(value)
    native        JSON types             -> unchanged
    object        anything else          -> dataclass fields or str(value)

Weak containers are checked before the generic map/set rules because they
implement the Mapping/Set protocols but must never be enumerated.
"""

import array
import asyncio
import concurrent.futures
import dataclasses
import inspect
import logging
import mmap
import re
import traceback
import uuid
import weakref
from collections.abc import Mapping, Set
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import PurePath
from typing import Any, Callable

from loglines.models import to_iso8601

logger = logging.getLogger(__name__)

# Longest repr kept for a callable whose parameters can't be read.
MAX_FUNCTION_TEXT = 50

_SIGNED_CODES = "bhilq"
_UNSIGNED_CODES = "BHILQ"
_FLOAT_CODES = "fd"

_FLAG_LETTERS = (
    (re.IGNORECASE, "i"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.VERBOSE, "x"),
    (re.ASCII, "a"),
)

_PARAMS_PATTERN = re.compile(r"\(([^)]*)\)")

_TEXTUAL_TYPES = (Decimal, Fraction, complex, uuid.UUID, PurePath, timedelta, Enum)
_NATIVE_TYPES = (bool, int, float, str, list, tuple)


@dataclass(frozen=True)
class NormalizeRule:
    name: str
    matches: Callable[[Any], bool]
    transform: Callable[[Any], Any]


def _cannot_stringify(value) -> str:
    return f"{type(value).__name__}(cannot stringify)"


def _to_text(value) -> str:
    try:
        return str(value)
    except RecursionError:
        raise
    except Exception:
        logger.debug("str() failed for %s value", type(value).__name__, exc_info=True)
        return _cannot_stringify(value)


def _error_to_dict(err: BaseException) -> dict:
    return {
        "message": str(err),
        "name": type(err).__name__,
        "stack": "".join(
            traceback.format_exception(type(err), err, err.__traceback__)
        ),
    }


def _typed_array_name(arr: array.array) -> str:
    bits = arr.itemsize * 8
    if arr.typecode in _SIGNED_CODES:
        return f"Int{bits}Array"
    if arr.typecode in _UNSIGNED_CODES:
        return f"Uint{bits}Array"
    if arr.typecode in _FLOAT_CODES:
        return f"Float{bits}Array"
    return "UnicodeArray"


def _date_to_text(value) -> str:
    if isinstance(value, datetime):
        return to_iso8601(value)
    return value.isoformat()


def _pattern_to_text(pattern: re.Pattern) -> str:
    source = pattern.pattern
    if isinstance(source, bytes):
        source = source.decode("latin-1")
    flags = "".join(letter for flag, letter in _FLAG_LETTERS if pattern.flags & flag)
    return f"/{source}/{flags}"


def _key_text(key) -> str:
    """Convert a mapping key the way JSON object keys are written."""
    if isinstance(key, str):
        return key
    if key is None:
        return "null"
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


def _is_foreign_mapping(value) -> bool:
    if not isinstance(value, Mapping):
        return False
    if type(value) is dict and all(isinstance(k, str) for k in value):
        return False
    return True


def _mapping_to_dict(value: Mapping) -> dict:
    # Later keys overwrite earlier ones when two keys share a text form.
    return {_key_text(k): v for k, v in value.items()}


def _is_pending_work(value) -> bool:
    if isinstance(value, (asyncio.Future, concurrent.futures.Future)):
        return True
    return inspect.isawaitable(value)


def _signature_params(fn) -> str | None:
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return None
    return str(sig.replace(return_annotation=inspect.Signature.empty))


def _text_signature_params(fn) -> str | None:
    """Pull a parameter list out of a builtin's __text_signature__."""
    text = getattr(fn, "__text_signature__", None)
    if not isinstance(text, str):
        return None
    match = _PARAMS_PATTERN.search(text)
    if match is None:
        return None
    params = [p.strip() for p in match.group(1).split(",")]
    params = [p for p in params if p and not p.startswith("$")]
    return "(" + ", ".join(params) + ")"


def describe_callable(fn) -> str:
    """Short signature text for a callable, e.g. 'connect(host, port=5432)'."""
    params = _signature_params(fn)
    if params is None:
        params = _text_signature_params(fn)

    if params is not None:
        name = getattr(fn, "__name__", None)
        if name == "<lambda>":
            name = "lambda"
        elif not isinstance(name, str) or not name:
            name = type(fn).__name__
        return f"{name}{params}"

    text = repr(fn)
    if len(text) > MAX_FUNCTION_TEXT:
        return text[: MAX_FUNCTION_TEXT - 3] + "..."
    return text


def _is_native(value) -> bool:
    return value is None or type(value) is dict or isinstance(value, _NATIVE_TYPES)


def _is_dataclass_instance(value) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _object_to_json(value):
    if _is_dataclass_instance(value):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    return _to_text(value)


DEFAULT_RULES = (
    NormalizeRule("error", lambda v: isinstance(v, BaseException), _error_to_dict),
    NormalizeRule(
        "typed_array",
        lambda v: isinstance(v, array.array),
        lambda v: f"{_typed_array_name(v)}({len(v)})",
    ),
    NormalizeRule(
        "buffer",
        lambda v: isinstance(v, (bytes, bytearray, mmap.mmap)),
        lambda v: "ArrayBuffer",
    ),
    NormalizeRule("date", lambda v: isinstance(v, (datetime, date, time)), _date_to_text),
    NormalizeRule("pattern", lambda v: isinstance(v, re.Pattern), _pattern_to_text),
    NormalizeRule(
        "weak_map",
        lambda v: isinstance(v, (weakref.WeakKeyDictionary, weakref.WeakValueDictionary)),
        lambda v: "WeakMap",
    ),
    NormalizeRule("weak_set", lambda v: isinstance(v, weakref.WeakSet), lambda v: "WeakSet"),
    NormalizeRule("map", _is_foreign_mapping, _mapping_to_dict),
    NormalizeRule("set", lambda v: isinstance(v, Set), list),
    NormalizeRule("promise", _is_pending_work, lambda v: "Promise"),
    NormalizeRule("data_view", lambda v: isinstance(v, memoryview), lambda v: "DataView"),
    NormalizeRule("callable", callable, describe_callable),
    NormalizeRule("textual", lambda v: isinstance(v, _TEXTUAL_TYPES), _to_text),
    NormalizeRule("native", _is_native, lambda v: v),
    NormalizeRule("object", lambda v: True, _object_to_json),
)


class ValueNormalizer:
    """Ordered rule table, callable as ``normalizer(key, value)``.

    Custom rules registered with :meth:`register` are checked before the
    existing ones. A value no rule matches is returned unchanged.
    """

    def __init__(self, rules=None):
        self._rules = list(DEFAULT_RULES if rules is None else rules)

    @property
    def rules(self) -> tuple[NormalizeRule, ...]:
        return tuple(self._rules)

    def register(
        self,
        name: str,
        matches: Callable[[Any], bool],
        transform: Callable[[Any], Any],
    ) -> None:
        self._rules.insert(0, NormalizeRule(name, matches, transform))

    def __call__(self, key: str, value):
        for rule in self._rules:
            try:
                if not rule.matches(value):
                    continue
                return rule.transform(value)
            except RecursionError:
                raise
            except Exception:
                logger.debug(
                    "Normalize rule %r failed for key %r", rule.name, key, exc_info=True
                )
                return _cannot_stringify(value)
        return value


_default_normalizer = ValueNormalizer()


def normalize_value(key: str, value):
    """Default json_value_serializer: best-effort JSON form of any value."""
    return _default_normalizer(key, value)
