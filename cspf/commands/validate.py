from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from ..models import CspfError, Playlist
from .output import CheckLine, error, ok, summarize, warning

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ValidateReport:
    checks: list[CheckLine]

    @property
    def ok(self) -> bool:
        return not any(check.failed for check in self.checks)

    def render(self) -> list[str]:
        return [check.render() for check in self.checks] + [summarize(self.checks)]


def check_file(path: Path) -> CheckLine:
    label = str(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        return error(label, f"unreadable: {exc.strerror or exc}")
    try:
        playlist = Playlist.from_bytes(data)
    except CspfError as exc:
        logger.debug("Validation failed for %s: %s", path, exc)
        return error(label, str(exc))
    count = len(playlist.get_track())
    if not count:
        return warning(label, "playlist has no tracks")
    return ok(label, f"{count} track(s)")


def run(paths: Iterable[Path]) -> ValidateReport:
    return ValidateReport(checks=[check_file(path) for path in paths])
