"""Data models for ACM Online Judge entities."""

from dataclasses import dataclass
from enum import Enum


class Language(str, Enum):
    """Submission language accepted by the judge."""

    CPP = "cpp"
    GIT = "git"
    VERILOG = "verilog"

    @property
    def status_filter(self) -> str:
        """Numeric code used by the status page's language filter."""
        return _STATUS_FILTER_CODES[self]


_STATUS_FILTER_CODES = {
    Language.CPP: "0",
    Language.GIT: "1",
    Language.VERILOG: "2",
}


@dataclass
class SubmissionRequest:
    """A payload to be submitted for a problem."""

    problem_id: int
    payload: str
    language: Language = Language.CPP


@dataclass(frozen=True)
class JudgeResult:
    """Final grading outcome as displayed by the judge."""

    status: str
    time: str
    mem: str
    score: str
