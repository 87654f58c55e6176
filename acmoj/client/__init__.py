"""Client module for ACM Online Judge interaction."""

from .client import OnlineJudgeClient
from .models import JudgeResult, Language, SubmissionRequest

__all__ = ["OnlineJudgeClient", "JudgeResult", "Language", "SubmissionRequest"]
