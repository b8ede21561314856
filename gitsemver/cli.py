"""CLI entry point for gitsemver."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from click.core import ParameterSource

from gitsemver.errors import GitSemverError
from gitsemver.pipeline import (
    default_branch_indicator,
    get_current_version,
    get_prerelease_label,
)
from gitsemver.repository import Repository
from gitsemver.settings import (
    DEFAULT_BRANCH,
    DEFAULT_SETTINGS_FILE,
    BranchSettings,
    EnvOverrides,
    Settings,
    load_settings,
)
from gitsemver.shell import note


def common_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by the version and label commands."""
    options = [
        click.option(
            "--path",
            type=click.Path(file_okay=False),
            default=".",
            show_default=True,
            help="The path to the git repository.",
        ),
        click.option(
            "--settings",
            "settings_file",
            type=click.Path(dir_okay=False),
            default=None,
            help=f"Settings file. [default: {DEFAULT_SETTINGS_FILE} if present]",
        ),
        click.option(
            "--trim-branch-prefix",
            is_flag=True,
            help="Trim branch prefixes feature/ and hotfix/ from the prerelease label.",
        ),
        click.option(
            "--default-branch",
            default=DEFAULT_BRANCH,
            show_default=True,
            help="Branch to treat as the default branch.",
        ),
        click.option(
            "--ignore-env",
            is_flag=True,
            help="Ignore CI environment variables (TRAVIS_*, CI_COMMIT_REF_NAME).",
        ),
        click.option(
            "-v",
            "--verbose",
            is_flag=True,
            help="Show information about how the version was calculated.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _open(path: str, settings_file: str | None) -> tuple[Repository, Settings]:
    if settings_file is None:
        settings = load_settings(Path(DEFAULT_SETTINGS_FILE))
    else:
        settings = load_settings(Path(settings_file), required=True)
    return Repository.open(path), settings


@click.group(invoke_without_command=True)
@click.version_option(package_name="gitsemver")
@common_options
@click.option(
    "--forbid-behind-default-branch",
    is_flag=True,
    help="Fail if the branch version is behind the default branch version.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    path: str,
    settings_file: str | None,
    trim_branch_prefix: bool,
    default_branch: str,
    ignore_env: bool,
    verbose: bool,
    forbid_behind_default_branch: bool,
) -> None:
    """Semantic version generator that uses git history."""
    if ctx.invoked_subcommand is not None:
        return

    branch_settings = BranchSettings(
        forbid_behind_default_branch=forbid_behind_default_branch,
        trim_branch_prefix=trim_branch_prefix,
        ignore_env_vars=ignore_env,
        default_branch=default_branch,
    )
    try:
        repo, settings = _open(path, settings_file)
        version = get_current_version(
            repo,
            settings,
            branch_settings,
            EnvOverrides.from_environ(os.environ),
            verbose=verbose,
        )
    except GitSemverError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(version)


def _with_group_options(ctx: click.Context) -> dict[str, Any]:
    """Subcommand params, taking values given before the subcommand as defaults."""
    params = dict(ctx.params)
    parent = ctx.parent
    if parent is None:
        return params
    for name in params:
        if (
            ctx.get_parameter_source(name) is ParameterSource.DEFAULT
            and name in parent.params
        ):
            params[name] = parent.params[name]
    return params


@cli.command()
@common_options
@click.pass_context
def label(ctx: click.Context, **_: Any) -> None:
    """Print the prerelease label, if any."""
    options = _with_group_options(ctx)
    branch_settings = BranchSettings(
        trim_branch_prefix=options["trim_branch_prefix"],
        ignore_env_vars=options["ignore_env"],
        default_branch=options["default_branch"],
    )
    try:
        repo, _ = _open(options["path"], options["settings_file"])
        name = get_prerelease_label(
            repo, branch_settings, EnvOverrides.from_environ(os.environ)
        )
    except GitSemverError as exc:
        raise click.ClickException(str(exc)) from exc

    if options["verbose"]:
        note(f"current branch is {name}")
    if name == default_branch_indicator(branch_settings):
        name = ""
    click.echo(name)
