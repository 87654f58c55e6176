import pytest

from acmoj.client import pages
from acmoj.client.models import JudgeResult
from acmoj.errors import (
    NetworkError,
    NotAuthenticated,
    ParseError,
    ProtocolError,
    WrongCredentials,
)

from conftest import detail_page


def test_login_wrong_credentials():
    with pytest.raises(WrongCredentials):
        pages.parse_login_response(200, "-1", None)


def test_login_token_is_cookie_before_first_semicolon():
    assert pages.parse_login_response(200, "0", "sid=abc; Path=/") == "sid=abc"


def test_login_unknown_body_is_protocol_error():
    with pytest.raises(ProtocolError):
        pages.parse_login_response(200, "<html>maintenance</html>", None)


def test_login_bad_status_is_network_error():
    with pytest.raises(NetworkError) as exc:
        pages.parse_login_response(500, "0", "sid=abc")
    assert not isinstance(exc.value, ProtocolError)


def test_login_without_cookie_is_protocol_error():
    with pytest.raises(ProtocolError):
        pages.parse_login_response(200, "0", None)


@pytest.mark.parametrize("body", ["0", "-1", "", "<html></html>"])
def test_submit_redirect_means_not_authenticated(body):
    with pytest.raises(NotAuthenticated):
        pages.check_submit_response(302, body)


def test_submit_ok():
    pages.check_submit_response(200, "0")


def test_submit_unknown_body():
    with pytest.raises(ProtocolError):
        pages.check_submit_response(200, "1")


def test_submit_bad_status():
    with pytest.raises(NetworkError):
        pages.check_submit_response(502, "")


def test_profile_marker():
    assert pages.is_logged_in_page('<a href="/OnlineJudge/profile">alice</a>')
    assert not pages.is_logged_in_page('<a href="/OnlineJudge/login">login</a>')


def test_submission_id_from_first_anchor():
    html = """
    <a href="/OnlineJudge/problem?problem_id=1000">1000</a>
    <a href="code?submit_id=482">482</a>
    <a href="code?submit_id=480">480</a>
    """
    assert pages.parse_submission_id(html) == 482


def test_submission_id_with_absolute_link():
    html = '<td><a href="/OnlineJudge/code?submit_id=77">77</a></td>'
    assert pages.parse_submission_id(html) == 77


def test_submission_id_missing_is_parse_error():
    with pytest.raises(ParseError):
        pages.parse_submission_id("<table><tr><td>no submissions</td></tr></table>")


def test_parse_judge_result():
    result = pages.parse_judge_result(detail_page("Accepted"))
    assert result == JudgeResult(status="Accepted", time="12ms", mem="1024KB", score="100")


def test_parse_judge_result_nested_status():
    html = detail_page('<a href="#"><span class="x">Wrong Answer</span></a>')
    assert pages.parse_judge_result(html).status == "Wrong Answer"


def test_parse_judge_result_is_stable():
    html = detail_page("Time Limit Exceeded", time="1001ms", score="0")
    assert pages.parse_judge_result(html) == pages.parse_judge_result(html)


def test_missing_header_is_parse_error():
    with pytest.raises(ParseError):
        pages.parse_judge_result("<table><tr><td>1</td></tr></table>")


def test_too_few_cells_is_parse_error():
    html = "<table><tr><th>评测编号</th></tr><tr><td>1</td><td>alice</td></tr></table>"
    with pytest.raises(ParseError):
        pages.parse_judge_result(html)


@pytest.mark.parametrize(
    "status, terminal",
    [
        ("Pending", False),
        ("pending", False),
        ("Running & Judging", False),
        ("RUNNING & JUDGING", False),
        ("Accepted", True),
        ("Memory Leak", True),
        ("Something New", True),
    ],
)
def test_is_terminal(status, terminal):
    assert pages.is_terminal(status) is terminal
