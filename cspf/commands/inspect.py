from __future__ import annotations

from datetime import date
from pathlib import Path

from ..models import Playlist, Track


def _format_duration(milliseconds: float) -> str:
    if not milliseconds or milliseconds < 0:
        return "--:--"
    total_seconds = int(milliseconds // 1000)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def _format_date(value: str | date) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return value or "-"


def _track_line(position: int, track: Track) -> str:
    creator = track.get_creator() or "Unknown artist"
    title = track.get_title() or track.get_location() or "Untitled"
    return f"{position:>3}. {creator} - {title} [{_format_duration(track.get_duration())}]"


def render(playlist: Playlist) -> str:
    tracks = playlist.get_track()
    lines = [
        f"Title:   {playlist.get_title() or '-'}",
        f"Creator: {playlist.get_creator() or '-'}",
        f"Date:    {_format_date(playlist.get_date())}",
        f"Tracks:  {len(tracks)}",
    ]
    lines.extend(_track_line(position, track) for position, track in enumerate(tracks, start=1))
    return "\n".join(lines)


def run(path: Path, *, as_json: bool = False) -> str:
    playlist = Playlist.from_bytes(path.read_bytes())
    if as_json:
        return playlist.to_json(indent=2)
    return render(playlist)
