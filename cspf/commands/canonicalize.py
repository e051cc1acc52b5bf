from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..config import CodecSettings
from ..models import Playlist

logger = logging.getLogger(__name__)


def run(source: Path, target: Optional[Path] = None, *, codec: Optional[CodecSettings] = None) -> bool:
    """Re-encode ``source`` canonically; returns whether the bytes changed."""
    original = source.read_bytes()
    encoded = Playlist.from_bytes(original).to_bytes(codec)
    destination = target or source
    changed = encoded != original
    if changed or destination != source:
        temp_path = destination.with_name(f".{destination.name}.tmp")
        temp_path.write_bytes(encoded)
        temp_path.replace(destination)
    logger.info(
        "%s -> %s (%s)", source, destination, "rewritten" if changed else "already canonical"
    )
    return changed
