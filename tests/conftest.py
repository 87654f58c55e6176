from pathlib import Path

import pytest
from requests.structures import CaseInsensitiveDict

from acmoj.client import OnlineJudgeClient
from acmoj.config.credential_store import CredentialStore


BASE_URL = "https://acm.example.org/OnlineJudge/"

LOGGED_IN_HTML = '<a href="/OnlineJudge/profile">me</a>'
LOGGED_OUT_HTML = '<a href="/OnlineJudge/login">sign in</a>'


def detail_page(status, time="12ms", mem="1024KB", score="100"):
    return f"""
    <table>
      <tr>
        <th>评测编号</th><th>用户昵称</th><th>题目</th><th>评测状态</th>
        <th>运行时间</th><th>内存</th><th>分数</th>
      </tr>
      <tr>
        <td>482</td>
        <td>alice</td>
        <td>1000</td>
        <td><span class="label label-info">{status}</span></td>
        <td>{time}</td>
        <td>{mem}</td>
        <td>{score}</td>
      </tr>
    </table>
    """


class FakeResponse:
    def __init__(self, text="", status_code=200, headers=None):
        self.text = text
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})


class FakeSession:
    """Replays queued responses and records every request."""

    def __init__(self, responses=()):
        self.responses = list(responses)
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if not self.responses:
            raise AssertionError(f"unexpected request: {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def config_path(tmp_path) -> Path:
    return tmp_path / "acmoj" / "config.json"


@pytest.fixture
def store(config_path):
    store = CredentialStore.load(config_path)
    store.set("baseUrl", BASE_URL)
    return store


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def client(store, session, sleeps):
    return OnlineJudgeClient(store, session=session, sleep=sleeps.append)
