from __future__ import annotations

# Wire keys of the CSPF transport record.
# Keep these centralized so the schemas, models and codec never diverge.

LOCATION = "location"
IDENTIFIER = "identifier"
TITLE = "title"
CREATOR = "creator"
ANNOTATION = "annotation"
INFO = "info"
IMAGE = "image"
ALBUM = "album"
TRACK_NUM = "trackNum"
DURATION = "duration"
LINK = "link"
META = "meta"
EXTENSION = "extension"

DATE = "date"
LICENSE = "license"
ATTRIBUTION = "attribution"
TRACK = "track"

TRACK_FIELDS = (
    LOCATION,
    IDENTIFIER,
    TITLE,
    CREATOR,
    ANNOTATION,
    INFO,
    IMAGE,
    ALBUM,
    TRACK_NUM,
    DURATION,
    LINK,
    META,
    EXTENSION,
)

PLAYLIST_METADATA_FIELDS = (
    TITLE,
    CREATOR,
    ANNOTATION,
    INFO,
    LOCATION,
    IDENTIFIER,
    IMAGE,
    DATE,
    LICENSE,
    ATTRIBUTION,
    LINK,
    META,
    EXTENSION,
)

PLAYLIST_FIELDS = PLAYLIST_METADATA_FIELDS + (TRACK,)
