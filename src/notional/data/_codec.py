# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Value codec between application values and Notion rich-text nodes.

A rich-text node on the wire is a list of segments, each segment being
``[text]`` or ``[text, [[kind, payload], ...]]``. Segments are parsed into a
small closed set of variants (:class:`PlainSegment`, :class:`LinkSegment`,
:class:`DateSegment`, :class:`UserSegment`) and values are decoded/encoded
through a table keyed by :class:`~notional.models.schema.ColumnType`.

Decoding never raises: absent or malformed property data degrades to the
column type's default value.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Union

from ..models.schema import ColumnSchema, ColumnType

# Placeholder text Notion renders in place of inline mentions (dates, users).
STAND_IN_TEXT = "‣"
LIST_SEPARATOR = [","]
CHECKBOX_TRUE = "Yes"

# Write-boundary alias for values that are already in the list-of-lines shape.
PRE_FORMATTED = "pre-formatted"

_DATE_FORMAT = "%Y-%m-%d"
_TIME_FORMAT = "%H:%M"


# --------------------------------------------------------------------- segments
@dataclass(frozen=True)
class PlainSegment:
    text: str

    def to_wire(self) -> List[Any]:
        return [self.text]


@dataclass(frozen=True)
class LinkSegment:
    text: str
    href: str

    def to_wire(self) -> List[Any]:
        return [self.text, [["a", self.href]]]


@dataclass(frozen=True)
class DateSegment:
    text: str
    date: Dict[str, Any]

    def to_wire(self) -> List[Any]:
        return [self.text, [["d", dict(self.date)]]]


@dataclass(frozen=True)
class UserSegment:
    text: str
    user_id: str

    def to_wire(self) -> List[Any]:
        return [self.text, [["u", self.user_id]]]


Segment = Union[PlainSegment, LinkSegment, DateSegment, UserSegment]


def _first_modifier(modifiers: Any) -> Optional[List[Any]]:
    if not isinstance(modifiers, list) or not modifiers:
        return None
    # Tolerate a bare ``["a", href]`` pair as well as the usual list of pairs.
    if isinstance(modifiers[0], str):
        return modifiers
    for modifier in modifiers:
        if isinstance(modifier, list) and modifier and modifier[0] in ("d", "u", "a"):
            return modifier
    return None


def parse_segment(raw: Any) -> Optional[Segment]:
    """Parse one wire segment; None when it is not a list with leading text."""
    if not isinstance(raw, list) or not raw:
        return None
    text = raw[0] if isinstance(raw[0], str) else ("" if raw[0] is None else str(raw[0]))
    modifier = _first_modifier(raw[1]) if len(raw) > 1 else None
    if modifier and len(modifier) > 1:
        kind, payload = modifier[0], modifier[1]
        if kind == "d" and isinstance(payload, dict):
            return DateSegment(text, payload)
        if kind == "u" and isinstance(payload, str):
            return UserSegment(text, payload)
        if kind == "a" and isinstance(payload, str):
            return LinkSegment(text, payload)
    return PlainSegment(text)


def parse_node(node: Any) -> List[Segment]:
    """Parse a rich-text node into segments, skipping anything malformed."""
    if not isinstance(node, list):
        return []
    segments = []
    for raw in node:
        segment = parse_segment(raw)
        if segment is not None:
            segments.append(segment)
    return segments


def to_wire(segments: Iterable[Segment]) -> List[List[Any]]:
    return [segment.to_wire() for segment in segments]


# --------------------------------------------------------------------- defaults
def default_for_type(column_type: Any) -> Any:
    """Value of a column whose property is missing from the row."""
    ct = ColumnType.parse(column_type)
    if ct in (ColumnType.FILE, ColumnType.MULTI_SELECT):
        return []
    if ct is ColumnType.CHECKBOX:
        return False
    return None


# --------------------------------------------------------------------- decoders
Decoder = Callable[[Any, Dict[str, Any]], Any]
Encoder = Callable[[Any], Any]


def _literal_text(node: Any) -> str:
    segments = parse_node(node)
    return segments[0].text if segments else ""


def _decode_text(node: Any, block: Dict[str, Any]) -> Any:
    return _literal_text(node)


def _decode_file(node: Any, block: Dict[str, Any]) -> Any:
    text = _literal_text(node)
    return text if text else []


def _decode_multi_select(node: Any, block: Dict[str, Any]) -> Any:
    text = _literal_text(node)
    return text.split(",") if text else []


def _decode_checkbox(node: Any, block: Dict[str, Any]) -> Any:
    return _literal_text(node) == CHECKBOX_TRUE


def _decode_date(node: Any, block: Dict[str, Any]) -> Any:
    segments = parse_node(node)
    if not segments:
        return None
    first = segments[0]
    if isinstance(first, DateSegment):
        return dict(first.date)
    return first.text


def _decode_user(node: Any, block: Dict[str, Any]) -> Any:
    segments = parse_node(node)
    if not segments:
        return None
    first = segments[0]
    if isinstance(first, UserSegment):
        # TODO: map the id to a display name once a name format is agreed on.
        return first.user_id
    return first.text


def _metadata_field(name: str) -> Decoder:
    def decode(node: Any, block: Dict[str, Any]) -> Any:
        return (block or {}).get(name)

    return decode


def _metadata_timestamp(name: str) -> Decoder:
    def decode(node: Any, block: Dict[str, Any]) -> Any:
        return format_timestamp((block or {}).get(name))

    return decode


def format_timestamp(value: Any) -> Optional[str]:
    """Render a millisecond epoch timestamp as an ISO-8601 UTC string (None when absent)."""
    if value is None or isinstance(value, bool):
        return None
    try:
        moment = _dt.datetime.fromtimestamp(float(value) / 1000.0, tz=_dt.timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


# --------------------------------------------------------------------- encoders
def _encode_plain(value: Any) -> Any:
    return to_wire([PlainSegment(value)])


def _encode_text(value: Any) -> Any:
    if isinstance(value, list):
        return value
    return _encode_plain(value)


def _encode_link(value: Any) -> Any:
    return to_wire([LinkSegment(value, value)])


def _encode_multi_select(value: Any) -> Any:
    if isinstance(value, str):
        return _encode_plain(value)
    return _encode_plain(",".join(str(v) for v in (value or [])))


def _encode_checkbox(value: Any) -> Any:
    return [[CHECKBOX_TRUE]] if value else None


def _encode_user(value: Any) -> Any:
    ids = value if isinstance(value, (list, tuple)) else [value]
    wire: List[Any] = []
    for index, user_id in enumerate(ids):
        wire.append(UserSegment(STAND_IN_TEXT, user_id).to_wire())
        if index != len(ids) - 1:
            wire.append(list(LIST_SEPARATOR))
    return wire


def _to_datetime(value: Any) -> _dt.datetime:
    if isinstance(value, _dt.datetime):
        return value
    if isinstance(value, _dt.date):
        return _dt.datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _dt.datetime.fromtimestamp(value / 1000.0, tz=_dt.timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return _dt.datetime.fromisoformat(text)
    raise TypeError(f"Cannot interpret {value!r} as a date")


def to_date_payload(value: Any) -> Dict[str, Any]:
    """
    Normalize a timestamp or a two-element range to Notion's date payload.

    :raises TypeError: If a value is not a date, datetime, epoch milliseconds or ISO string.
    :raises ValueError: If a string is not valid ISO-8601, or a range does not have exactly two ends.
    """
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, (list, tuple)):
        if len(value) != 2:
            raise ValueError(f"A date range needs exactly two values (start, end), got {len(value)}")
        start, end = _to_datetime(value[0]), _to_datetime(value[1])
        return {
            "type": "datetimerange",
            "start_date": start.strftime(_DATE_FORMAT),
            "start_time": start.strftime(_TIME_FORMAT),
            "end_date": end.strftime(_DATE_FORMAT),
            "end_time": end.strftime(_TIME_FORMAT),
        }
    start = _to_datetime(value)
    return {
        "type": "datetime",
        "start_date": start.strftime(_DATE_FORMAT),
        "start_time": start.strftime(_TIME_FORMAT),
    }


def _encode_date(value: Any) -> Any:
    return to_wire([DateSegment(STAND_IN_TEXT, to_date_payload(value))])


# --------------------------------------------------------------------- registry
class _Codec(NamedTuple):
    decode: Decoder
    encode: Encoder


_CODECS: Dict[ColumnType, _Codec] = {
    ColumnType.TEXT: _Codec(_decode_text, _encode_text),
    ColumnType.URL: _Codec(_decode_text, _encode_link),
    ColumnType.EMAIL: _Codec(_decode_text, _encode_link),
    ColumnType.PHONE_NUMBER: _Codec(_decode_text, _encode_link),
    ColumnType.FILE: _Codec(_decode_file, _encode_link),
    ColumnType.DATE: _Codec(_decode_date, _encode_date),
    ColumnType.MULTI_SELECT: _Codec(_decode_multi_select, _encode_multi_select),
    ColumnType.CHECKBOX: _Codec(_decode_checkbox, _encode_checkbox),
    ColumnType.USER: _Codec(_decode_user, _encode_user),
    ColumnType.PERSON: _Codec(_decode_user, _encode_user),
    ColumnType.CREATED_BY: _Codec(_metadata_field("created_by_id"), _encode_plain),
    ColumnType.CREATED_TIME: _Codec(_metadata_timestamp("created_time"), _encode_plain),
    ColumnType.LAST_EDITED_BY: _Codec(_metadata_field("last_edited_by_id"), _encode_plain),
    ColumnType.LAST_EDITED_TIME: _Codec(_metadata_timestamp("last_edited_time"), _encode_plain),
    ColumnType.ID: _Codec(_metadata_field("id"), _encode_plain),
}

_DEFAULT_CODEC = _Codec(_decode_text, _encode_plain)

_missing = set(ColumnType) - set(_CODECS)
if _missing:
    raise RuntimeError(f"No codec registered for column types: {sorted(m.value for m in _missing)}")

# Decoded from block metadata rather than ``properties``.
_BLOCK_SOURCED = frozenset(
    {
        ColumnType.CREATED_BY,
        ColumnType.CREATED_TIME,
        ColumnType.LAST_EDITED_BY,
        ColumnType.LAST_EDITED_TIME,
        ColumnType.ID,
    }
)


def decode_value(column_type: Any, node: Any, block: Optional[Dict[str, Any]] = None) -> Any:
    """
    Decode a property node for a column of ``column_type``.

    ``node`` is the raw property value (None when the row has no such property);
    ``block`` is the row's block value, used by metadata-backed types.
    """
    ct = ColumnType.parse(column_type)
    block = block if isinstance(block, dict) else {}
    if ct in _BLOCK_SOURCED:
        return _CODECS[ct].decode(node, block)
    if node is None:
        return default_for_type(ct)
    codec = _CODECS.get(ct, _DEFAULT_CODEC) if ct is not None else _DEFAULT_CODEC
    return codec.decode(node, block)


def encode_value(column_type: Any, value: Any) -> Any:
    """Encode an application value for a property write of ``column_type``."""
    if column_type == PRE_FORMATTED:
        return value
    ct = ColumnType.parse(column_type)
    codec = _CODECS.get(ct, _DEFAULT_CODEC) if ct is not None else _DEFAULT_CODEC
    return codec.encode(value)


def decode_row(columns: Iterable[ColumnSchema], block: Dict[str, Any]) -> Dict[str, Any]:
    """Decode a row block into ``{display_name: value}`` for the given columns."""
    block = block if isinstance(block, dict) else {}
    properties = block.get("properties")
    if not isinstance(properties, dict):
        properties = {}
    return {
        column.display_name: decode_value(column.type, properties.get(column.internal_id), block)
        for column in columns
    }


__all__ = [
    "PRE_FORMATTED",
    "STAND_IN_TEXT",
    "PlainSegment",
    "LinkSegment",
    "DateSegment",
    "UserSegment",
    "Segment",
    "parse_node",
    "parse_segment",
    "to_wire",
    "default_for_type",
    "decode_value",
    "encode_value",
    "decode_row",
    "format_timestamp",
    "to_date_payload",
]
