"""Command-line interface for acmoj."""

import functools
import logging
import re
from pathlib import Path
from typing import Optional

import click
from rich.markup import escape

from . import __version__
from .client import Language, OnlineJudgeClient, SubmissionRequest
from .config import CredentialStore, LocalConfig
from .config import credential_store
from .config.credential_store import default_config_path, encode_password
from .errors import AcmOJError, NotAuthenticated, RepositoryError, StorageError
from .utils.git import find_repository_root, get_remote_url
from .utils.terminal import (
    ERROR,
    INFO,
    SUCCESS,
    WARN,
    confirm,
    console,
    format_status_color,
    highlight,
    setup_logging,
)


logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def source_candidates(problem_id: int) -> list:
    """Places searched for a source file when none is given."""
    return [
        f"{problem_id}.hpp",
        f"src/{problem_id}.hpp",
        f"{problem_id}.h",
        f"src/{problem_id}.h",
        f"{problem_id}.cpp",
        f"src/{problem_id}.cpp",
        "main.cpp",
    ]


def fail(message: str):
    """Print an error and exit with a non-zero status."""
    console.print(f"{ERROR} {message}")
    raise SystemExit(1)


def handle_errors(func):
    """Report every failure of a command as an error line and exit 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except AcmOJError as e:
            fail(escape(str(e)))
        except click.exceptions.Abort:
            raise SystemExit(1)
        except click.exceptions.ClickException:
            raise
        except Exception as e:
            logger.debug("unexpected error", exc_info=True)
            fail(f"unexpected error: {escape(str(e) or repr(e))}")

    return wrapper


def open_client(ctx: click.Context) -> OnlineJudgeClient:
    store = CredentialStore.load(ctx.obj["config_path"])
    return OnlineJudgeClient(store)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, "-v", "--version")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="ACMOJ_CONFIG",
    default=None,
    help="Credential file (default: per-user app directory).",
)
@click.option("--debug", is_flag=True, default=False, help="Enable debug output.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], debug: bool):
    """acmoj - CLI client for ACM Online Judge."""
    setup_logging(debug)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path or default_config_path()


@cli.command()
@click.option(
    "-r",
    "--remember",
    is_flag=True,
    help="Remember password. NOTE: stores your password unencrypted on disk.",
)
@click.option("-f", "--force", is_flag=True, help="Force relogin even if already logged in.")
@click.pass_context
@handle_errors
def login(ctx: click.Context, remember: bool, force: bool):
    """Sign in to ACM Online Judge."""
    client = open_client(ctx)
    store = client.store

    if not force and client.is_logged_in():
        console.print(
            f"{SUCCESS} you are already signed in as [green]{escape(store.username or '')}[/green]. "
            f"use {highlight('-f')} to force relogin."
        )
        return

    if not force and store.has_credentials():
        client.relogin()
        console.print(
            f"{SUCCESS} successfully signed in as [green]{escape(store.username)}[/green]. "
            f"use {highlight('-f')} to sign in to a different account."
        )
        return

    if remember:
        console.print(f"{WARN} your password will be saved unencrypted on disk.")

    username = click.prompt("ACMOJ username?", default=store.username or None)
    if not USERNAME_PATTERN.match(username):
        fail(f'invalid username "{escape(username)}"')

    remembered = store.password
    prompt = "ACMOJ password?"
    if remembered:
        prompt += " (leave blank to use remembered password)"
    password = click.prompt(
        prompt, hide_input=True, default="" if remembered else None, show_default=False
    )
    password = password or remembered or ""

    console.print(f"{INFO} trying to sign you in...")
    client.login(username, password)
    store.set(credential_store.USERNAME, username)
    if remember:
        store.set(credential_store.PASSWORD, encode_password(password))
    else:
        store.delete(credential_store.PASSWORD)
    console.print(f"{SUCCESS} successfully signed in as [green]{escape(username)}[/green].")


@cli.command()
@click.pass_context
@handle_errors
def logout(ctx: click.Context):
    """Sign out from ACM Online Judge."""
    client = open_client(ctx)
    if not client.is_logged_in():
        console.print(f"{SUCCESS} you are not logged in. no need to sign out.")
        return
    client.logout()
    console.print(f"{SUCCESS} successfully signed out.")


@cli.command()
@click.argument("problem_id", type=int, required=False)
@click.argument("source_file", type=click.Path(path_type=Path), required=False)
@click.option("-y", "--yes", is_flag=True, help="Answer yes to all questions.")
@click.option(
    "-l",
    "--lang",
    type=click.Choice([Language.CPP.value, Language.VERILOG.value]),
    default=Language.CPP.value,
    help="Language of the source file.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0),
    default=None,
    help="Stop waiting for judge results after this many seconds (default: wait forever).",
)
@click.pass_context
@handle_errors
def submit(
    ctx: click.Context,
    problem_id: Optional[int],
    source_file: Optional[Path],
    yes: bool,
    lang: str,
    timeout: Optional[float],
):
    """Submit a problem.

    Without PROBLEM_ID the current git repository is submitted as configured
    by 'acmoj git'. Without SOURCE_FILE some common locations are tried.

    Example: acmoj submit 1000 src/1000.cpp
    """
    if problem_id is None:
        submit_repository(ctx, yes, timeout)
        return

    if find_repository_root() is not None:
        console.print(
            f"{INFO} you are in a git repository, but you are going to submit a source file. "
            f"use {highlight('acmoj git <problemId>')} to set up submission for a git repository."
        )

    if source_file is None:
        candidates = source_candidates(problem_id)
        source_file = next((Path(c) for c in candidates if Path(c).exists()), None)
        if source_file is None:
            tried = ", ".join(f"[green]{c}[/green]" for c in candidates)
            fail(f"cannot determine where is your source file. have tried: {tried}")

    if not source_file.exists():
        fail(f"source file [red]{escape(str(source_file))}[/red] does not exist.")

    try:
        code = source_file.read_bytes().decode("utf-8", errors="replace")
    except OSError as e:
        fail(f"cannot read source file: {escape(str(e))}")

    client = open_client(ctx)
    request = SubmissionRequest(problem_id, code, Language(lang))
    submit_and_wait(client, request, str(source_file), yes, timeout)


def submit_repository(ctx: click.Context, yes: bool, timeout: Optional[float]):
    """Submit the enclosing git repository for its configured problem."""
    root = find_repository_root()
    rc_path = LocalConfig.find_config()
    if rc_path is None or not rc_path.exists():
        console.print(f"{ERROR} please specify a problem id to submit.")
        click.echo(ctx.get_help())
        if rc_path is not None:
            console.print(
                f"{INFO} to submit a git repository, use {highlight('acmoj git <problemId>')} "
                "to configure the git repository first."
            )
        raise SystemExit(1)

    problem_id = LocalConfig.load(rc_path).problem_id
    repo_url = get_remote_url(root)
    console.print(f"{WARN} please be sure to commit and push your code before you submit.")

    client = open_client(ctx)
    request = SubmissionRequest(problem_id, repo_url, Language.GIT)
    submit_and_wait(client, request, "", yes, timeout)


def submit_and_wait(
    client: OnlineJudgeClient,
    request: SubmissionRequest,
    filename: str,
    yes: bool,
    timeout: Optional[float] = None,
):
    """Submit a payload, find its submission id and wait for the verdict."""
    client.ensure_logged_in()

    console.print(
        f"{INFO} you are going to submit {highlight(filename or request.payload)} "
        f"for problem {highlight(request.problem_id)}."
    )
    if not yes and not confirm("continue?", default=True):
        raise SystemExit(1)

    try:
        client.submit(request.problem_id, request.payload, request.language)
    except NotAuthenticated:
        raise
    except AcmOJError as e:
        fail(f"cannot submit code: {escape(str(e))}")

    try:
        submission_id = client.resolve_submission_id(
            request.problem_id, client.store.username or "", request.language
        )
    except AcmOJError as e:
        fail(f"error getting submission id for your submission: {escape(str(e))}")

    console.print(
        f"{SUCCESS} code submitted as submission {highlight(submission_id)}. "
        "waiting for judge results..."
    )

    try:
        with console.status("[bold green]Judging..."):
            result = client.poll_judge_result(submission_id, deadline=timeout)
    except AcmOJError as e:
        fail(f"cannot get submission status: {escape(str(e))}")

    console.print(f"{INFO} your submission status is {format_status_color(result.status)}")
    console.print(
        f"{INFO} time: {highlight(result.time)}, mem: {highlight(result.mem)}, "
        f"score: {highlight(result.score)}"
    )
    console.print(
        f"{INFO} visit {highlight(client.submission_url(submission_id))} to view details."
    )


@cli.command()
@click.argument("problem_id", type=int)
@click.option("-y", "-f", "--yes", "--force", "yes", is_flag=True, help="Answer yes to all questions.")
@handle_errors
def git(problem_id: int, yes: bool):
    """Configure current git repo to be submitted."""
    rc_path = LocalConfig.find_config()
    if rc_path is None:
        raise RepositoryError(
            "not in a git repository. use 'git init' to initialize one."
        )

    if rc_path.exists():
        try:
            current = highlight(LocalConfig.load(rc_path).problem_id)
        except StorageError:
            current = "[red]an unreadable configuration[/red]"
        if not yes:
            console.print(f"{INFO} this git repository is configured to submit to problem {current}.")
            if not confirm("override?", default=False):
                raise SystemExit(1)
        else:
            console.print(
                f"{WARN} overriding config file as it is configured to submit to problem {current}."
            )

    LocalConfig(problem_id=problem_id).save(rc_path)
    console.print(
        f"{SUCCESS} created config file at {highlight(rc_path)}. "
        "you should include this file in your version control."
    )


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
