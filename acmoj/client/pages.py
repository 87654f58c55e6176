"""
Interpreters for the judge's pages.

Each function takes a response (status code and body) from one endpoint
and turns it into a value or an error. All knowledge about the judge's
markup lives here.
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..errors import (
    NetworkError,
    NotAuthenticated,
    ParseError,
    ProtocolError,
    WrongCredentials,
)
from .models import JudgeResult


PROFILE_MARKER = "/OnlineJudge/profile"
RESULT_TABLE_HEADER = "评测编号"
NON_TERMINAL_STATUSES = ("running & judging", "pending")

LOGIN_OK = "0"
LOGIN_WRONG_CREDENTIALS = "-1"
SUBMIT_OK = "0"

_SUBMISSION_LINK = re.compile(r"code\?submit_id=(\d+)")

# identifier, nickname, problem, status, time, memory, score
_RESULT_CELLS = 7


def is_logged_in_page(html: str) -> bool:
    """Check whether the root page shows the profile link of a signed-in user."""
    return PROFILE_MARKER in html


def parse_login_response(status_code: int, body: str, set_cookie: Optional[str]) -> str:
    """
    Interpret the login endpoint's answer.
    Returns the session token, or raises WrongCredentials/NetworkError.
    """
    if status_code != 200:
        raise NetworkError(f"network error: login request responded with status {status_code}.")
    if body == LOGIN_WRONG_CREDENTIALS:
        raise WrongCredentials()
    if body != LOGIN_OK:
        raise ProtocolError(f"network error: login request responded with unknown response: {body}")
    if not set_cookie:
        raise ProtocolError("network error: login request did not set a session cookie.")
    return set_cookie.split(";")[0]


def check_submit_response(status_code: int, body: str) -> None:
    """Interpret the submit endpoint's answer."""
    if status_code == 302:
        raise NotAuthenticated()
    if status_code != 200:
        raise NetworkError(f"network error: submit request responded with status {status_code}.")
    if body != SUBMIT_OK:
        raise ProtocolError(f"network error: submit request responded with unknown response: {body}")


def parse_submission_id(html: str) -> int:
    """Identifier of the first submission linked from a status listing."""
    soup = BeautifulSoup(html, "html.parser")
    link = soup.find("a", href=_SUBMISSION_LINK)
    if link is None:
        raise ParseError("cannot parse status html")
    return int(_SUBMISSION_LINK.search(link["href"]).group(1))


def parse_judge_result(html: str) -> JudgeResult:
    """Scrape the results table of a submission detail page."""
    soup = BeautifulSoup(html, "html.parser")

    header = soup.find("th", string=lambda s: s is not None and s.strip() == RESULT_TABLE_HEADER)
    if header is None:
        raise ParseError("cannot find judge results table")

    cells: List[Tag] = header.find_all_next("td", limit=_RESULT_CELLS)
    if len(cells) != _RESULT_CELLS:
        raise ParseError(
            f"judge results table has {len(cells)} cells, expected {_RESULT_CELLS}"
        )

    _, _, _, status, time, mem, score = cells
    return JudgeResult(
        status=_innermost_text(status),
        time=time.get_text(strip=True),
        mem=mem.get_text(strip=True),
        score=score.get_text(strip=True),
    )


def is_terminal(status: str) -> bool:
    """Whether judging has finished for a submission with this status."""
    lowered = status.lower()
    return not any(marker in lowered for marker in NON_TERMINAL_STATUSES)


def _innermost_text(cell: Tag) -> str:
    node = cell
    while True:
        children = [c for c in node.children if isinstance(c, Tag) and c.get_text(strip=True)]
        if not children:
            return node.get_text(strip=True)
        node = children[0]
