"CSPF playlist document model and canonical binary codec."

from importlib import metadata

from .models import (
    CspfError,
    Playlist,
    PlaylistDecodeError,
    PlaylistEncodeError,
    PlaylistShapeError,
    PlaylistTypeError,
    Track,
    TrackTypeError,
)

__all__ = [
    "CspfError",
    "Playlist",
    "PlaylistDecodeError",
    "PlaylistEncodeError",
    "PlaylistShapeError",
    "PlaylistTypeError",
    "Track",
    "TrackTypeError",
    "__version__",
]


def __getattr__(name: str) -> str:
    if name == "__version__":
        try:
            return metadata.version("cspf")
        except metadata.PackageNotFoundError:  # pragma: no cover - during editable dev installs
            return "0.0.0"
    raise AttributeError(name)
