"""Main ACM Online Judge HTTP client with scraping capabilities."""

import logging
import threading
import time
from typing import Callable, Optional
from urllib.parse import urljoin, urlparse

import requests
from rich.markup import escape

from . import pages
from .models import JudgeResult, Language
from ..config import credential_store
from ..config.credential_store import CredentialStore
from ..errors import LoginRequired, NetworkError, PollCancelled, WrongCredentials
from ..utils.terminal import INFO, SUCCESS, console


logger = logging.getLogger(__name__)

POLL_INTERVAL = 2.0
REDIRECT_STATUSES = (301, 302, 303, 307, 308)
MAX_REDIRECTS = 30


class OnlineJudgeClient:
    """HTTP client for interacting with ACM Online Judge."""

    def __init__(
        self,
        store: CredentialStore,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the client around a loaded credential store."""
        self.store = store
        self.session = session or requests.Session()
        self._sleep = sleep

    @property
    def base_url(self) -> str:
        return self.store.base_url

    def url(self, path: str) -> str:
        return urljoin(self.base_url, path)

    def _request(
        self,
        method: str,
        path: str,
        auth: bool = True,
        allow_redirects: bool = True,
        **kwargs,
    ) -> requests.Response:
        """
        Send a request, attaching the session token as a raw cookie header.
        Redirects are followed by hand so the header survives every hop
        that stays on the judge's host.
        """
        headers = dict(kwargs.pop("headers", None) or {})
        token = self.store.session_token
        if auth and token:
            headers["Cookie"] = token

        url = self.url(path)
        response = self._send(method, url, headers, **kwargs)

        hops = 0
        while allow_redirects and response.status_code in REDIRECT_STATUSES:
            location = response.headers.get("location")
            if not location:
                break
            hops += 1
            if hops > MAX_REDIRECTS:
                raise NetworkError(f"network error: too many redirects from {self.url(path)}")

            url = urljoin(url, location)
            if urlparse(url).netloc != urlparse(self.base_url).netloc:
                headers.pop("Cookie", None)
            if response.status_code in (301, 302, 303):
                method = "GET"
                kwargs.pop("data", None)
            # the query string now comes from the Location header
            kwargs.pop("params", None)
            response = self._send(method, url, headers, **kwargs)
        return response

    def _send(self, method: str, url: str, headers: dict, **kwargs) -> requests.Response:
        try:
            response = self.session.request(
                method, url, headers=headers, allow_redirects=False, **kwargs
            )
        except requests.RequestException as e:
            raise NetworkError(f"network error: {e}") from e
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    def _get(self, path: str, **kwargs) -> requests.Response:
        return self._request("GET", path, **kwargs)

    def _post(self, path: str, data: dict = None, **kwargs) -> requests.Response:
        return self._request("POST", path, data=data, **kwargs)

    def is_logged_in(self) -> bool:
        """Probe the service root with the stored session token."""
        if not self.store.has(credential_store.SESSION_TOKEN):
            return False
        response = self._get("")
        return pages.is_logged_in_page(response.text)

    def login(self, username: str, password: str) -> str:
        """
        Authenticate with the judge and store the new session token.
        Raises WrongCredentials when the judge rejects the pair.
        """
        response = self._post(
            "login",
            data={"username": username, "password": password, "next": "/"},
            auth=False,
            allow_redirects=False,
        )
        token = pages.parse_login_response(
            response.status_code, response.text, response.headers.get("set-cookie")
        )
        self.store.set(credential_store.SESSION_TOKEN, token)
        logger.debug("signed in as %s", username)
        return token

    def relogin(self) -> str:
        """Sign in again with the stored username and password."""
        try:
            return self.login(self.store.username or "", self.store.password or "")
        except WrongCredentials as e:
            raise WrongCredentials("wrong credentials. did you change your password?") from e

    def ensure_logged_in(self) -> None:
        """
        Make sure the stored session is valid, signing in again with the
        remembered password once if it has expired.
        """
        if self.is_logged_in():
            return

        if not self.store.password:
            raise LoginRequired()

        console.print(f"{INFO} session expired. trying to sign you in...")
        self.relogin()
        console.print(
            f"{SUCCESS} successfully signed in as "
            f"[green]{escape(self.store.username or '')}[/green]."
        )

    def logout(self) -> None:
        """End the current session and forget its token."""
        response = self._get("logout", allow_redirects=False)
        if response.status_code not in (200, 302):
            raise NetworkError(
                f"log out request responded with unknown status {response.status_code}"
            )
        self.store.delete(credential_store.SESSION_TOKEN)

    def submit(self, problem_id: int, payload: str, language: Language = Language.CPP) -> None:
        """Submit source code or a repository URL for a problem."""
        response = self._post(
            "submit",
            params={"problem_id": problem_id},
            data={"code": payload, "lang": Language(language).value, "problem_id": problem_id},
            allow_redirects=False,
        )
        pages.check_submit_response(response.status_code, response.text)

    def resolve_submission_id(
        self, problem_id: int, username: str, language: Language = Language.CPP
    ) -> int:
        """Find the identifier of the most recent matching submission."""
        response = self._get(
            "status",
            params={
                "submitter": username,
                "problem_id": problem_id,
                "status": "-1",
                "lang": Language(language).status_filter,
            },
        )
        return pages.parse_submission_id(response.text)

    def get_judge_result(self, submission_id: int) -> JudgeResult:
        """Fetch the submission detail page and scrape its results table."""
        response = self._get("code", params={"submit_id": submission_id})
        return pages.parse_judge_result(response.text)

    def poll_judge_result(
        self,
        submission_id: int,
        interval: float = POLL_INTERVAL,
        deadline: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> JudgeResult:
        """
        Poll the detail page until the submission reaches a terminal status.
        Waits forever unless a deadline (seconds) or a cancel event is given.
        """
        started = time.monotonic()
        iteration = 0
        while True:
            iteration += 1
            result = self.get_judge_result(submission_id)
            logger.debug("poll #%d of %s: %s", iteration, submission_id, result.status)
            if pages.is_terminal(result.status):
                return result

            if deadline is not None and time.monotonic() - started + interval > deadline:
                raise PollCancelled(
                    f"no judge result for submission {submission_id} within {deadline:g}s."
                )
            if cancel is not None:
                if cancel.wait(interval):
                    raise PollCancelled()
            else:
                self._sleep(interval)

    def submission_url(self, submission_id: int) -> str:
        return self.url(f"code?submit_id={submission_id}")
