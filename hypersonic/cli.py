"""CLI entry point for hypersonic."""

import logging
import sys
from typing import Any, Dict, Optional, Tuple

import click
from rich.logging import RichHandler

from . import __version__
from .config import MergeStrategy, load_client_config
from .errors import HypersonicError
from .pr import Hypersonic
from .utils import GitHandler


def _setup_logging(verbose: bool) -> None:
    """Route library logs through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, rich_tracebacks=verbose)],
    )
    # PyGithub and urllib3 are chatty at DEBUG
    logging.getLogger("github").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _fail(message: str) -> None:
    click.echo(click.style("Error: ", fg="red", bold=True) + message)
    sys.exit(1)


def _client(ctx: click.Context) -> Hypersonic:
    """Build a client from the global options."""
    opts = ctx.obj
    try:
        config = load_client_config(opts["config"], token=opts["token"], base_url=opts["base_url"])
    except HypersonicError as e:
        _fail(str(e))
    return Hypersonic(config)


def _overrides(
    title: Optional[str],
    description: Optional[str],
    base: Optional[str],
    draft: Optional[bool],
    labels: Tuple[str, ...],
    reviewers: Tuple[str, ...],
    team_reviewers: Tuple[str, ...],
    merge_strategy: Optional[str],
    auto_merge: Optional[bool],
    commit_message: Optional[str],
) -> Dict[str, Any]:
    """Collect only the PR options given on the command line."""
    values = {
        "title": title,
        "description": description,
        "base_branch": base,
        "draft": draft,
        "labels": list(labels) or None,
        "reviewers": list(reviewers) or None,
        "team_reviewers": list(team_reviewers) or None,
        "merge_strategy": MergeStrategy(merge_strategy) if merge_strategy else None,
        "auto_merge": auto_merge,
        "commit_message": commit_message,
    }
    return {key: value for key, value in values.items() if value is not None}


def pr_options(func):
    """Pull request options shared by the PR-creating commands."""
    options = [
        click.option("--title", help="Pull request title"),
        click.option("--description", "-d", help="Pull request body"),
        click.option("--base", help="Base branch (defaults to the repository's default branch)"),
        click.option("--draft/--no-draft", default=None, help="Open as a draft pull request"),
        click.option("--label", "labels", multiple=True, help="Label to attach (repeatable)"),
        click.option("--reviewer", "reviewers", multiple=True, help="User to request a review from (repeatable)"),
        click.option("--team-reviewer", "team_reviewers", multiple=True, help="Team to request a review from (repeatable)"),
        click.option(
            "--merge-strategy",
            type=click.Choice([s.value for s in MergeStrategy]),
            help="Merge method used with --auto-merge",
        ),
        click.option("--auto-merge/--no-auto-merge", default=None, help="Enable auto-merge"),
        click.option("--commit-message", "-m", help="Commit message for every file"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="hypersonic")
@click.option(
    "--token",
    "-t",
    envvar="GITHUB_TOKEN",
    help="GitHub personal access token (or set GITHUB_TOKEN env var)",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML config file",
)
@click.option("--base-url", help="GitHub API base URL (for GitHub Enterprise)")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, token: Optional[str], config_path: Optional[str], base_url: Optional[str], verbose: bool):
    """Hypersonic: open GitHub pull requests from content and local files."""
    _setup_logging(verbose)
    ctx.obj = {"token": token, "config": config_path, "base_url": base_url, "verbose": verbose}


@cli.command()
@click.argument("repo")
@click.argument("remote_path")
@click.option("--text", help="File content to write")
@click.option(
    "--from-file",
    "from_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Local file whose content to write",
)
@pr_options
@click.pass_context
def content(ctx, repo: str, remote_path: str, text: Optional[str], from_file: Optional[str], **pr_opts):
    """Create a PR that writes one file.

    \b
    Example:
        hypersonic content owner/repo docs/notes.md --text "hello" --title "Add notes"
        hypersonic content owner/repo config.yaml --from-file ./config.yaml --label automated
    """
    if (text is None) == (from_file is None):
        _fail("Provide exactly one of --text or --from-file.")

    overrides = _overrides(**pr_opts)
    client = _client(ctx)
    try:
        if from_file:
            pr_url = client.create_pr_from_file(repo, from_file, remote_path, **overrides)
        else:
            pr_url = client.create_pr_from_content(repo, text, remote_path, **overrides)
    except HypersonicError as e:
        _fail(str(e))

    click.echo(click.style("Success! ", fg="green", bold=True) + "Pull request created:")
    click.echo(f"  {pr_url}")


@cli.command()
@click.argument("repo")
@click.argument("mappings", nargs=-1, required=True)
@pr_options
@click.pass_context
def files(ctx, repo: str, mappings: Tuple[str, ...], **pr_opts):
    """Create a PR from local files, given as LOCAL=REMOTE pairs.

    \b
    Example:
        hypersonic files owner/repo ./README.md=README.md ./src/app.py=src/app.py
    """
    file_map: Dict[str, str] = {}
    for mapping in mappings:
        local_path, sep, remote_path = mapping.partition("=")
        if not sep or not local_path or not remote_path:
            raise click.BadParameter(f"expected LOCAL=REMOTE, got {mapping!r}", param_hint="MAPPINGS")
        file_map[local_path] = remote_path

    overrides = _overrides(**pr_opts)
    client = _client(ctx)
    try:
        pr_url = client.create_pr_from_files(repo, file_map, **overrides)
    except HypersonicError as e:
        _fail(str(e))

    click.echo(click.style("Success! ", fg="green", bold=True) + "Pull request created:")
    click.echo(f"  {pr_url}")


@cli.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
@click.argument("paths", nargs=-1)
@click.pass_context
def diff(ctx, path: str, paths: Tuple[str, ...]):
    """Show the local diff against HEAD.

    \b
    Example:
        hypersonic diff ./my-repo src/app.py
    """
    git = GitHandler(ctx.obj["token"] or "")
    try:
        output = git.get_local_diff(path, list(paths) or None)
    except HypersonicError as e:
        _fail(str(e))

    if output:
        click.echo(output, nl=False)
    else:
        click.echo("No changes.")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
