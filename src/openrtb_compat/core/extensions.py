"""Extension (``ext``) merging.

Every OpenRTB entity carries an ``ext`` object for data its structured schema
cannot express. Downgrading a request moves 2.6 fields into these objects, so
all migrations funnel through :func:`merge_extension`.

Serialization is canonical: keys sorted at every depth, compact separators,
no HTML or ``\\uXXXX`` escaping (extensions routinely embed URLs and markup).
Numbers are written back exactly as they were read (``1e2`` stays ``1e2``,
``1e400`` is not collapsed to infinity), so data a merge does not touch keeps
its bytes.

Parse failures are reported with stable, position-free wording such as
``invalid character 'm' looking for beginning of value`` so the message can
be compared verbatim by callers and tests.
"""

import json
from typing import Any

from openrtb_compat.core.exceptions import MalformedExtension

RawExtension = bytes | str | None


class IntLiteral(int):
    """An integer parsed from an extension, remembering its source text."""

    def __new__(cls, lexeme: str):
        number = super().__new__(cls, lexeme)
        number.lexeme = lexeme
        return number


class FloatLiteral(float):
    """A non-integer number parsed from an extension, remembering its source text.

    The float value may be lossy (``1e400`` is ``inf``); ``lexeme`` is not.
    """

    def __new__(cls, lexeme: str):
        number = super().__new__(cls, lexeme)
        number.lexeme = lexeme
        return number


def _parse_int(lexeme: str) -> int | float:
    try:
        return IntLiteral(lexeme)
    except ValueError:
        # past sys.get_int_max_str_digits(); the lexeme still round-trips
        return FloatLiteral(lexeme)


_JSON_KIND = {
    list: "array",
    str: "string",
    int: "number",
    float: "number",
    IntLiteral: "number",
    FloatLiteral: "number",
    bool: "boolean",
}


def _quote_char(char: str) -> str:
    if char == "'":
        return "'\\''"
    if char == '"':
        return "'\"'"
    if char.isprintable():
        return f"'{char}'"
    return f"'{repr(char)[1:-1]}'"


def _describe_decode_error(exc: json.JSONDecodeError) -> str:
    """Render a JSONDecodeError in stable wire-protocol wording."""
    doc, pos, msg = exc.doc, exc.pos, exc.msg

    if pos >= len(doc) or msg.startswith("Unterminated string"):
        return "unexpected end of JSON input"

    char = _quote_char(doc[pos])
    if msg == "Expecting value":
        return f"invalid character {char} looking for beginning of value"
    if msg == "Extra data":
        return f"invalid character {char} after top-level value"
    if msg.startswith("Expecting property name"):
        return f"invalid character {char} looking for beginning of object key string"
    if msg == "Expecting ':' delimiter":
        return f"invalid character {char} after object key"
    if msg.startswith("Invalid control character"):
        return f"invalid character {char} in string literal"
    if msg.startswith("Invalid \\"):
        return f"invalid character {char} in string escape code"

    return f"{msg} at offset {pos}"


def _reject_constant(token: str) -> Any:
    # NaN / Infinity are not JSON; the stdlib decoder accepts them by default.
    if token.startswith("-"):
        raise MalformedExtension(f"invalid character {_quote_char(token[1])} in numeric literal")
    raise MalformedExtension(f"invalid character {_quote_char(token[0])} looking for beginning of value")


def _as_bytes(raw: RawExtension) -> bytes:
    if raw is None:
        return b""
    if isinstance(raw, str):
        return raw.encode("utf-8")
    return bytes(raw)


def _encode(value: Any) -> str:
    if isinstance(value, (IntLiteral, FloatLiteral)):
        return value.lexeme
    if isinstance(value, dict):
        members = []
        for key in sorted(value):
            if not isinstance(key, str):
                raise TypeError(f"extension keys must be str, not {type(key).__name__}")
            members.append(f"{_encode(key)}:{_encode(value[key])}")
        return "{" + ",".join(members) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(item) for item in value) + "]"
    return json.dumps(value, ensure_ascii=False, allow_nan=False)


def dump_extension(value: Any) -> bytes:
    """Serialize ``value`` canonically (sorted keys, compact, unescaped).

    Numbers that came out of :func:`parse_extension` are written with their
    original spelling.
    """
    return _encode(value).encode("utf-8")


def parse_extension(existing: RawExtension) -> dict[str, Any]:
    """Parse an ``ext`` document into a dict.

    Args:
        existing: Raw extension bytes (or text). Empty or absent yields ``{}``.

    Returns:
        A new dict holding the top-level keys of the extension. Numbers are
        IntLiteral / FloatLiteral, which compare like int / float.

    Raises:
        MalformedExtension: If the document is not valid JSON, or is valid
            JSON but not an object.
    """
    raw = _as_bytes(existing)
    if not raw:
        return {}

    try:
        parsed = json.loads(
            raw,
            parse_int=_parse_int,
            parse_float=FloatLiteral,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as e:
        raise MalformedExtension(_describe_decode_error(e), raw=raw) from e
    except UnicodeDecodeError as e:
        raise MalformedExtension(f"invalid UTF-8 in extension at byte {e.start}", raw=raw) from e
    except MalformedExtension as e:
        e.raw = raw
        raise

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        kind = _JSON_KIND.get(type(parsed), type(parsed).__name__)
        raise MalformedExtension(f"extension must be a JSON object, got {kind}", raw=raw)
    return parsed


def merge_extension(existing: RawExtension, key: str, value: Any) -> bytes:
    """Insert or overwrite ``key`` in an extension, keeping every other key.

    Args:
        existing: Current raw ``ext`` of the owning object, possibly empty.
        key: Top-level key to set.
        value: Any JSON-serializable value.

    Returns:
        The canonical serialization of the merged object.

    Raises:
        MalformedExtension: If ``existing`` cannot be parsed as a JSON object.
    """
    merged = parse_extension(existing)
    merged[key] = value
    return dump_extension(merged)
