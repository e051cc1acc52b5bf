"""
Shape validation for untyped playlist and track payloads.

Payloads arrive as plain Python values (decoded CBOR, JSON, literals in
caller code). These helpers decide whether such a value has the shape of a
CSPF track or playlist before it is allowed anywhere near the models.

Two policies exist:

- ``ShapePolicy.STRICT``: every field must be present and correctly typed.
  All model entry points use this policy.
- ``ShapePolicy.PARTIAL``: every field is optional, but fields that are
  present must still be correctly typed.

Nothing in this module raises for bad input; it answers ``True``/``False``
or returns a list of readable reasons.
"""
from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Union

from pydantic import (
    AfterValidator,
    AwareDatetime,
    ConfigDict,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    with_config,
)
from typing_extensions import Annotated, TypedDict

from . import fields


class ShapePolicy(str, Enum):
    STRICT = "strict"
    PARTIAL = "partial"


class ShapeKind(str, Enum):
    TRACK = "track"
    PLAYLIST = "playlist"


def is_string(value: object) -> bool:
    return isinstance(value, str)


def is_finite_number(value: object) -> bool:
    # bool is an int subclass but never a number here
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def is_plain_record(value: object) -> bool:
    return isinstance(value, dict)


def is_record_list(value: object) -> bool:
    return isinstance(value, list) and all(is_plain_record(entry) for entry in value)


def is_date_like(value: object) -> bool:
    # datetimes must carry an offset so they name a single instant
    if isinstance(value, datetime):
        return value.utcoffset() is not None
    return isinstance(value, date)


def _require_finite(value: Union[int, float]) -> Union[int, float]:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("number must be finite")
    return value


FiniteNumber = Annotated[Union[StrictInt, StrictFloat], AfterValidator(_require_finite)]
Record = Dict[Any, Any]
RecordList = List[Record]
DateValue = Union[StrictStr, AwareDatetime, date]

_SHAPE_CONFIG = ConfigDict(strict=True, extra="ignore")

_TRACK_FIELD_TYPES: Dict[str, Any] = {
    fields.LOCATION: StrictStr,
    fields.IDENTIFIER: StrictStr,
    fields.TITLE: StrictStr,
    fields.CREATOR: StrictStr,
    fields.ANNOTATION: StrictStr,
    fields.INFO: StrictStr,
    fields.IMAGE: StrictStr,
    fields.ALBUM: StrictStr,
    fields.TRACK_NUM: FiniteNumber,
    fields.DURATION: FiniteNumber,
    fields.LINK: RecordList,
    fields.META: RecordList,
    fields.EXTENSION: Record,
}

_PLAYLIST_METADATA_TYPES: Dict[str, Any] = {
    fields.TITLE: StrictStr,
    fields.CREATOR: StrictStr,
    fields.ANNOTATION: StrictStr,
    fields.INFO: StrictStr,
    fields.LOCATION: StrictStr,
    fields.IDENTIFIER: StrictStr,
    fields.IMAGE: StrictStr,
    fields.DATE: DateValue,
    fields.LICENSE: StrictStr,
    fields.ATTRIBUTION: RecordList,
    fields.LINK: RecordList,
    fields.META: RecordList,
    fields.EXTENSION: Record,
}

TrackShape = with_config(_SHAPE_CONFIG)(TypedDict("TrackShape", _TRACK_FIELD_TYPES))
PartialTrackShape = with_config(_SHAPE_CONFIG)(
    TypedDict("PartialTrackShape", _TRACK_FIELD_TYPES, total=False)
)
PlaylistShape = with_config(_SHAPE_CONFIG)(
    TypedDict(
        "PlaylistShape",
        {**_PLAYLIST_METADATA_TYPES, fields.TRACK: List[TrackShape]},
    )
)
PartialPlaylistShape = with_config(_SHAPE_CONFIG)(
    TypedDict(
        "PartialPlaylistShape",
        {**_PLAYLIST_METADATA_TYPES, fields.TRACK: List[PartialTrackShape]},
        total=False,
    )
)

_ADAPTERS: Dict[tuple[ShapeKind, ShapePolicy], TypeAdapter] = {
    (ShapeKind.TRACK, ShapePolicy.STRICT): TypeAdapter(TrackShape),
    (ShapeKind.TRACK, ShapePolicy.PARTIAL): TypeAdapter(PartialTrackShape),
    (ShapeKind.PLAYLIST, ShapePolicy.STRICT): TypeAdapter(PlaylistShape),
    (ShapeKind.PLAYLIST, ShapePolicy.PARTIAL): TypeAdapter(PartialPlaylistShape),
}


def shape_errors(
    value: object,
    kind: ShapeKind,
    policy: ShapePolicy = ShapePolicy.STRICT,
) -> list[str]:
    """
    Return the reasons ``value`` does not conform to the ``kind`` shape.

    An empty list means the value conforms. Each entry reads
    ``"<dotted.location>: <message>"``; problems with the value as a whole
    are reported against ``<root>``.
    """
    adapter = _ADAPTERS[(ShapeKind(kind), ShapePolicy(policy))]
    try:
        adapter.validate_python(value)
    except ValidationError as exc:
        reasons: list[str] = []
        for error in exc.errors():
            where = ".".join(str(part) for part in error["loc"]) or "<root>"
            reasons.append(f"{where}: {error['msg']}")
        return reasons
    return []


def is_track_shape(value: object, policy: ShapePolicy = ShapePolicy.STRICT) -> bool:
    return not shape_errors(value, ShapeKind.TRACK, policy)


def is_playlist_shape(value: object, policy: ShapePolicy = ShapePolicy.STRICT) -> bool:
    return not shape_errors(value, ShapeKind.PLAYLIST, policy)
