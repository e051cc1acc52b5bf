from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class Status(str, Enum):
    OK = "OK"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass(frozen=True, slots=True)
class CheckLine:
    label: str
    status: Status
    detail: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status is Status.ERROR

    def render(self) -> str:
        if self.detail:
            return f"{self.label}: {self.status.value} ({self.detail})"
        return f"{self.label}: {self.status.value}"


def ok(label: str, detail: Optional[str] = None) -> CheckLine:
    return CheckLine(label, Status.OK, detail)


def warning(label: str, detail: Optional[str] = None) -> CheckLine:
    return CheckLine(label, Status.WARNING, detail)


def error(label: str, detail: Optional[str] = None) -> CheckLine:
    return CheckLine(label, Status.ERROR, detail)


def summarize(lines: Iterable[CheckLine]) -> str:
    counts = {status: 0 for status in Status}
    total = 0
    for line in lines:
        counts[line.status] += 1
        total += 1
    return (
        f"{total} file(s) checked: {counts[Status.OK]} ok, "
        f"{counts[Status.WARNING]} warning(s), {counts[Status.ERROR]} error(s)"
    )
