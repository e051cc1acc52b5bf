from __future__ import annotations

import copy
import json
import logging
import re
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

import cbor2

from . import fields
from .codec import BytesLike, decode_record, encode_record
from .compare import equal_arrays, equal_records
from .config import CodecSettings
from .validation import (
    ShapeKind,
    is_date_like,
    is_finite_number,
    is_plain_record,
    is_playlist_shape,
    is_record_list,
    is_string,
    is_track_shape,
    shape_errors,
)

logger = logging.getLogger(__name__)

PlaylistRecord = Dict[str, Any]
DateValue = Union[str, date]
Number = Union[int, float]
LoadCallback = Callable[..., None]

LOAD_SUCCESS_MESSAGE = "Playlist loaded successfully"
NOT_A_PLAYLIST_MESSAGE = "Object stored in payload is not a CSPF playlist"


class CspfError(Exception):
    """Base class for errors raised when data crosses into the CSPF model."""


class TrackTypeError(CspfError, TypeError):
    """Raised when a track payload or initializer value has the wrong type."""


class PlaylistTypeError(CspfError, TypeError):
    """Raised when a playlist initializer value has the wrong type."""


class PlaylistDecodeError(CspfError, ValueError):
    """Raised when a byte payload is not decodable CBOR."""


class PlaylistShapeError(CspfError, ValueError):
    """Raised when a decoded payload is not a CSPF playlist."""


class PlaylistEncodeError(CspfError, ValueError):
    """Raised when a playlist holds a value the codec cannot encode."""


def _is_date_value(value: object) -> bool:
    return is_string(value) or is_date_like(value)


def _json_default(value: object) -> object:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _apply_initial(
    error_type: type[CspfError],
    kind: str,
    assignments: Iterable[Tuple[str, Callable[[Any], bool], Any]],
) -> None:
    for key, setter, value in assignments:
        if not setter(value):
            raise error_type(f"{kind} field '{key}' cannot be set to {value!r}")


def _detached(value: Any) -> Any:
    """Deep copy of a bag value with tuples turned into lists, as CBOR decodes them."""
    if isinstance(value, dict):
        return {key: _detached(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_detached(item) for item in value]
    return copy.deepcopy(value)


def _slot_name(key: str) -> str:
    return "_" + re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


class _GuardedRecord:
    __slots__ = ()

    def _assign(self, attr: str, value: Any, predicate: Callable[[Any], bool]) -> bool:
        if not predicate(value):
            return False
        if isinstance(value, (list, dict)):
            try:
                value = _detached(value)
            except (TypeError, copy.Error, RecursionError) as exc:
                logger.debug("Rejected value for %s: %s", attr.lstrip("_"), exc)
                return False
        setattr(self, attr, value)
        return True

    def _project(self, keys: Iterable[str]) -> PlaylistRecord:
        return {key: copy.deepcopy(getattr(self, _slot_name(key))) for key in keys}


class Track(_GuardedRecord):
    """
    One playlist entry.

    Every setter validates its input and returns ``False`` without touching
    state when the value has the wrong type. Collection fields are copied on
    the way in and on the way out, so callers never share them.
    """

    __slots__ = (
        "_location",
        "_identifier",
        "_title",
        "_creator",
        "_annotation",
        "_info",
        "_image",
        "_album",
        "_track_num",
        "_duration",
        "_link",
        "_meta",
        "_extension",
    )

    def __init__(
        self,
        *,
        location: str = "",
        identifier: str = "",
        title: str = "",
        creator: str = "",
        annotation: str = "",
        info: str = "",
        image: str = "",
        album: str = "",
        track_num: Number = 0,
        duration: Number = 0,
        link: Optional[List[PlaylistRecord]] = None,
        meta: Optional[List[PlaylistRecord]] = None,
        extension: Optional[PlaylistRecord] = None,
    ) -> None:
        _apply_initial(
            TrackTypeError,
            "Track",
            (
                (fields.LOCATION, self.set_location, location),
                (fields.IDENTIFIER, self.set_identifier, identifier),
                (fields.TITLE, self.set_title, title),
                (fields.CREATOR, self.set_creator, creator),
                (fields.ANNOTATION, self.set_annotation, annotation),
                (fields.INFO, self.set_info, info),
                (fields.IMAGE, self.set_image, image),
                (fields.ALBUM, self.set_album, album),
                (fields.TRACK_NUM, self.set_track_num, track_num),
                (fields.DURATION, self.set_duration, duration),
                (fields.LINK, self.set_link, [] if link is None else link),
                (fields.META, self.set_meta, [] if meta is None else meta),
                (fields.EXTENSION, self.set_extension, {} if extension is None else extension),
            ),
        )

    def set_location(self, location: str) -> bool:
        return self._assign("_location", location, is_string)

    def get_location(self) -> str:
        return self._location

    def set_identifier(self, identifier: str) -> bool:
        return self._assign("_identifier", identifier, is_string)

    def get_identifier(self) -> str:
        return self._identifier

    def set_title(self, title: str) -> bool:
        return self._assign("_title", title, is_string)

    def get_title(self) -> str:
        return self._title

    def set_creator(self, creator: str) -> bool:
        return self._assign("_creator", creator, is_string)

    def get_creator(self) -> str:
        return self._creator

    def set_annotation(self, annotation: str) -> bool:
        return self._assign("_annotation", annotation, is_string)

    def get_annotation(self) -> str:
        return self._annotation

    def set_info(self, info: str) -> bool:
        return self._assign("_info", info, is_string)

    def get_info(self) -> str:
        return self._info

    def set_image(self, image: str) -> bool:
        return self._assign("_image", image, is_string)

    def get_image(self) -> str:
        return self._image

    def set_album(self, album: str) -> bool:
        return self._assign("_album", album, is_string)

    def get_album(self) -> str:
        return self._album

    def set_track_num(self, track_num: Number) -> bool:
        return self._assign("_track_num", track_num, is_finite_number)

    def get_track_num(self) -> Number:
        return self._track_num

    def set_duration(self, duration: Number) -> bool:
        return self._assign("_duration", duration, is_finite_number)

    def get_duration(self) -> Number:
        return self._duration

    def set_link(self, link: List[PlaylistRecord]) -> bool:
        return self._assign("_link", link, is_record_list)

    def get_link(self) -> List[PlaylistRecord]:
        return copy.deepcopy(self._link)

    def set_meta(self, meta: List[PlaylistRecord]) -> bool:
        return self._assign("_meta", meta, is_record_list)

    def get_meta(self) -> List[PlaylistRecord]:
        return copy.deepcopy(self._meta)

    def set_extension(self, extension: PlaylistRecord) -> bool:
        return self._assign("_extension", extension, is_plain_record)

    def get_extension(self) -> PlaylistRecord:
        return copy.deepcopy(self._extension)

    def compare(self, other: object) -> bool:
        if not isinstance(other, Track):
            return False
        return (
            self._location == other._location
            and self._identifier == other._identifier
            and self._title == other._title
            and self._creator == other._creator
            and self._annotation == other._annotation
            and self._info == other._info
            and self._image == other._image
            and self._album == other._album
            and self._track_num == other._track_num
            and self._duration == other._duration
            and equal_arrays(self._link, other._link)
            and equal_arrays(self._meta, other._meta)
            and equal_records(self._extension, other._extension)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Track):
            return NotImplemented
        return self.compare(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Track(title={self._title!r}, creator={self._creator!r}, location={self._location!r})"

    def to_record(self) -> PlaylistRecord:
        return self._project(fields.TRACK_FIELDS)

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_record(), default=_json_default, indent=indent)

    @staticmethod
    def is_track_instance(value: object) -> bool:
        return isinstance(value, Track)

    @staticmethod
    def is_parsable(value: object) -> bool:
        return is_track_shape(value)

    @classmethod
    def coerce(cls, source: Union["Track", PlaylistRecord]) -> "Track":
        """
        Return ``source`` itself if it already is a ``Track``, otherwise build
        one from a complete track record.

        Raises ``TrackTypeError`` when ``source`` is not a parsable track.
        """
        if isinstance(source, Track):
            return source
        if not cls.is_parsable(source):
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Rejected track payload: %s",
                    "; ".join(shape_errors(source, ShapeKind.TRACK)),
                )
            raise TrackTypeError("Track payload is not parsable")
        return cls(
            location=source[fields.LOCATION],
            identifier=source[fields.IDENTIFIER],
            title=source[fields.TITLE],
            creator=source[fields.CREATOR],
            annotation=source[fields.ANNOTATION],
            info=source[fields.INFO],
            image=source[fields.IMAGE],
            album=source[fields.ALBUM],
            track_num=source[fields.TRACK_NUM],
            duration=source[fields.DURATION],
            link=source[fields.LINK],
            meta=source[fields.META],
            extension=source[fields.EXTENSION],
        )


class Playlist(_GuardedRecord):
    """
    A CSPF playlist document and its ordered tracks.

    Field setters follow the same guarded contract as ``Track``. Tracks are
    addressed by position; ``identifier`` is metadata, not a lookup key.
    Crossing the byte boundary (``load_from_bytes``/``from_bytes``) raises on
    bad input instead of returning ``False``.
    """

    __slots__ = (
        "_title",
        "_creator",
        "_annotation",
        "_info",
        "_location",
        "_identifier",
        "_image",
        "_date",
        "_license",
        "_attribution",
        "_link",
        "_meta",
        "_extension",
        "_track",
    )

    def __init__(
        self,
        *,
        title: str = "",
        creator: str = "",
        annotation: str = "",
        info: str = "",
        location: str = "",
        identifier: str = "",
        image: str = "",
        date: DateValue = "",
        license: str = "",
        attribution: Optional[List[PlaylistRecord]] = None,
        link: Optional[List[PlaylistRecord]] = None,
        meta: Optional[List[PlaylistRecord]] = None,
        extension: Optional[PlaylistRecord] = None,
        track: Optional[List[Union[Track, PlaylistRecord]]] = None,
    ) -> None:
        _apply_initial(
            PlaylistTypeError,
            "Playlist",
            (
                (fields.TITLE, self.set_title, title),
                (fields.CREATOR, self.set_creator, creator),
                (fields.ANNOTATION, self.set_annotation, annotation),
                (fields.INFO, self.set_info, info),
                (fields.LOCATION, self.set_location, location),
                (fields.IDENTIFIER, self.set_identifier, identifier),
                (fields.IMAGE, self.set_image, image),
                (fields.DATE, self.set_date, date),
                (fields.LICENSE, self.set_license, license),
                (fields.ATTRIBUTION, self.set_attribution, [] if attribution is None else attribution),
                (fields.LINK, self.set_link, [] if link is None else link),
                (fields.META, self.set_meta, [] if meta is None else meta),
                (fields.EXTENSION, self.set_extension, {} if extension is None else extension),
            ),
        )
        entries = [] if track is None else track
        if not isinstance(entries, list):
            raise PlaylistTypeError(f"Playlist field 'track' cannot be set to {entries!r}")
        self._track: List[Track] = [Track.coerce(entry) for entry in entries]

    def set_title(self, title: str) -> bool:
        return self._assign("_title", title, is_string)

    def get_title(self) -> str:
        return self._title

    def set_creator(self, creator: str) -> bool:
        return self._assign("_creator", creator, is_string)

    def get_creator(self) -> str:
        return self._creator

    def set_annotation(self, annotation: str) -> bool:
        return self._assign("_annotation", annotation, is_string)

    def get_annotation(self) -> str:
        return self._annotation

    def set_info(self, info: str) -> bool:
        return self._assign("_info", info, is_string)

    def get_info(self) -> str:
        return self._info

    def set_location(self, location: str) -> bool:
        return self._assign("_location", location, is_string)

    def get_location(self) -> str:
        return self._location

    def set_identifier(self, identifier: str) -> bool:
        return self._assign("_identifier", identifier, is_string)

    def get_identifier(self) -> str:
        return self._identifier

    def set_image(self, image: str) -> bool:
        return self._assign("_image", image, is_string)

    def get_image(self) -> str:
        return self._image

    def set_date(self, value: DateValue) -> bool:
        return self._assign("_date", value, _is_date_value)

    def get_date(self) -> DateValue:
        return self._date

    def set_license(self, license: str) -> bool:
        return self._assign("_license", license, is_string)

    def get_license(self) -> str:
        return self._license

    def set_attribution(self, attribution: List[PlaylistRecord]) -> bool:
        return self._assign("_attribution", attribution, is_record_list)

    def get_attribution(self) -> List[PlaylistRecord]:
        return copy.deepcopy(self._attribution)

    def set_link(self, link: List[PlaylistRecord]) -> bool:
        return self._assign("_link", link, is_record_list)

    def get_link(self) -> List[PlaylistRecord]:
        return copy.deepcopy(self._link)

    def set_meta(self, meta: List[PlaylistRecord]) -> bool:
        return self._assign("_meta", meta, is_record_list)

    def get_meta(self) -> List[PlaylistRecord]:
        return copy.deepcopy(self._meta)

    def set_extension(self, extension: PlaylistRecord) -> bool:
        return self._assign("_extension", extension, is_plain_record)

    def get_extension(self) -> PlaylistRecord:
        return copy.deepcopy(self._extension)

    # Track collection

    def get_track(self) -> List[Track]:
        return list(self._track)

    def get_track_by_id(self, index: int) -> Optional[Track]:
        if not self._valid_index(index):
            return None
        return self._track[index]

    @staticmethod
    def is_track_collection(value: object) -> bool:
        return isinstance(value, list) and all(
            isinstance(entry, Track) or Track.is_parsable(entry) for entry in value
        )

    @staticmethod
    def is_parsable_track_collection(value: object) -> bool:
        return isinstance(value, list) and all(Track.is_parsable(entry) for entry in value)

    def set_track(self, entries: List[Union[Track, PlaylistRecord]]) -> bool:
        if not isinstance(entries, list):
            return False
        replacement: List[Track] = []
        for position, entry in enumerate(entries):
            try:
                replacement.append(Track.coerce(entry))
            except TrackTypeError:
                logger.debug("Track list replacement aborted at entry %d", position)
                return False
        self._track = replacement
        return True

    def push_track(self, entry: Union[Track, PlaylistRecord]) -> bool:
        try:
            track = Track.coerce(entry)
        except TrackTypeError:
            return False
        self._track.append(track)
        return True

    def add_track(
        self,
        location: str = "",
        identifier: str = "",
        title: str = "",
        creator: str = "",
        annotation: str = "",
        info: str = "",
        image: str = "",
        album: str = "",
        track_num: Number = 0,
        duration: Number = 0,
        link: Optional[List[PlaylistRecord]] = None,
        meta: Optional[List[PlaylistRecord]] = None,
        extension: Optional[PlaylistRecord] = None,
    ) -> bool:
        try:
            track = Track(
                location=location,
                identifier=identifier,
                title=title,
                creator=creator,
                annotation=annotation,
                info=info,
                image=image,
                album=album,
                track_num=track_num,
                duration=duration,
                link=link,
                meta=meta,
                extension=extension,
            )
        except TrackTypeError as exc:
            logger.debug("add_track rejected: %s", exc)
            return False
        self._track.append(track)
        return True

    def remove_track(self, candidate: Union[Track, PlaylistRecord]) -> bool:
        try:
            target = Track.coerce(candidate)
        except TrackTypeError:
            return False
        for position, entry in enumerate(self._track):
            if entry.compare(target):
                del self._track[position]
                return True
        return False

    def _valid_index(self, index: object) -> bool:
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        return 0 <= index < len(self._track)

    def _update_track(self, index: int, setter: Callable[[Track, Any], bool], value: Any) -> bool:
        if not self._valid_index(index):
            return False
        return setter(self._track[index], value)

    def set_track_location(self, index: int, location: str) -> bool:
        return self._update_track(index, Track.set_location, location)

    def set_track_identifier(self, index: int, identifier: str) -> bool:
        return self._update_track(index, Track.set_identifier, identifier)

    def set_track_title(self, index: int, title: str) -> bool:
        return self._update_track(index, Track.set_title, title)

    def set_track_creator(self, index: int, creator: str) -> bool:
        return self._update_track(index, Track.set_creator, creator)

    def set_track_annotation(self, index: int, annotation: str) -> bool:
        return self._update_track(index, Track.set_annotation, annotation)

    def set_track_info(self, index: int, info: str) -> bool:
        return self._update_track(index, Track.set_info, info)

    def set_track_image(self, index: int, image: str) -> bool:
        return self._update_track(index, Track.set_image, image)

    def set_track_album(self, index: int, album: str) -> bool:
        return self._update_track(index, Track.set_album, album)

    def set_track_track_num(self, index: int, track_num: Number) -> bool:
        return self._update_track(index, Track.set_track_num, track_num)

    def set_track_duration(self, index: int, duration: Number) -> bool:
        return self._update_track(index, Track.set_duration, duration)

    def set_track_link(self, index: int, link: List[PlaylistRecord]) -> bool:
        return self._update_track(index, Track.set_link, link)

    def set_track_meta(self, index: int, meta: List[PlaylistRecord]) -> bool:
        return self._update_track(index, Track.set_meta, meta)

    def set_track_extension(self, index: int, extension: PlaylistRecord) -> bool:
        return self._update_track(index, Track.set_extension, extension)

    # Projection and serialization

    def __repr__(self) -> str:
        return f"Playlist(title={self._title!r}, tracks={len(self._track)})"

    def to_record(self) -> PlaylistRecord:
        record = self._project(fields.PLAYLIST_METADATA_FIELDS)
        record[fields.TRACK] = [entry.to_record() for entry in self._track]
        return record

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_record(), default=_json_default, indent=indent)

    def to_bytes(self, codec: Optional[CodecSettings] = None) -> bytes:
        try:
            return encode_record(self.to_record(), codec)
        except cbor2.CBOREncodeError as exc:
            raise PlaylistEncodeError(f"Unable to encode playlist: {exc}") from exc

    def load_from_bytes(self, data: BytesLike, callback: Optional[LoadCallback] = None) -> None:
        """
        Replace this playlist's state with the playlist encoded in ``data``.

        The payload is decoded and validated in full before anything is
        replaced, so a failed load leaves the playlist untouched. ``callback``
        receives ``(False, message)`` on success and ``(True, message, error)``
        on failure; failures are raised after the callback returns.
        """
        try:
            loaded = self._decode(data)
        except CspfError as exc:
            if callback is not None:
                callback(True, str(exc), exc)
            raise
        for slot in Playlist.__slots__:
            setattr(self, slot, getattr(loaded, slot))
        logger.debug("Loaded playlist %r with %d track(s)", self._title, len(self._track))
        if callback is not None:
            callback(False, LOAD_SUCCESS_MESSAGE)

    @classmethod
    def from_bytes(cls, data: BytesLike, callback: Optional[LoadCallback] = None) -> "Playlist":
        playlist = cls()
        playlist.load_from_bytes(data, callback)
        return playlist

    @classmethod
    def _decode(cls, data: BytesLike) -> "Playlist":
        try:
            parsed = decode_record(data)
        except (cbor2.CBORDecodeError, TypeError) as exc:
            raise PlaylistDecodeError(f"Unable to decode CSPF payload: {exc}") from exc
        reasons = shape_errors(parsed, ShapeKind.PLAYLIST)
        if reasons:
            logger.debug("Decoded payload rejected: %s", "; ".join(reasons))
            raise PlaylistShapeError(f"{NOT_A_PLAYLIST_MESSAGE} ({reasons[0]})")
        return cls(
            title=parsed[fields.TITLE],
            creator=parsed[fields.CREATOR],
            annotation=parsed[fields.ANNOTATION],
            info=parsed[fields.INFO],
            location=parsed[fields.LOCATION],
            identifier=parsed[fields.IDENTIFIER],
            image=parsed[fields.IMAGE],
            date=parsed[fields.DATE],
            license=parsed[fields.LICENSE],
            attribution=parsed[fields.ATTRIBUTION],
            link=parsed[fields.LINK],
            meta=parsed[fields.META],
            extension=parsed[fields.EXTENSION],
            track=parsed[fields.TRACK],
        )

    @staticmethod
    def is_playlist(value: object) -> bool:
        return isinstance(value, Playlist)

    @staticmethod
    def is_parsable(value: object) -> bool:
        return is_playlist_shape(value)
