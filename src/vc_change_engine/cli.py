"""
Command line interface for vc_change_engine.

This module defines the ``main`` click group used as the entry point of
the ``smartcheckin`` command. It locates the repository, loads the
configuration, builds a :class:`~vc_change_engine.service.ChangeEngine`
on top of :class:`~vc_change_engine.vcs.git_client.GitClient` and renders
the results. Exit codes are listed below.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
import subprocess
import tempfile
import time
from pathlib import Path
from typing import List, Optional, Tuple

import click

from vc_change_engine import __version__
from vc_change_engine.config.loader import ConfigError, load_config
from vc_change_engine.grouping.change_grouper import ChangeGrouper
from vc_change_engine.grouping.group_model import ChangeGroup
from vc_change_engine.inbound.models import InboundChanges
from vc_change_engine.log import StdLogger
from vc_change_engine.messages import format_result_message
from vc_change_engine.result import ErrorCode
from vc_change_engine.service import ChangeEngine
from vc_change_engine.vcs.git_client import GitClient

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_NO_CHANGES = 4
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_ALL_DECLINED = 8

COMMIT_EXIT_CODES = {
    ErrorCode.NO_CHANGES: EXIT_NO_CHANGES,
    ErrorCode.NO_GROUPS_APPROVED: EXIT_ALL_DECLINED,
    ErrorCode.GET_CHANGES_FAILED: EXIT_VCS_FAILURE,
    ErrorCode.STAGE_FAILED: EXIT_VCS_FAILURE,
    ErrorCode.COMMIT_FAILED: EXIT_VCS_FAILURE,
    ErrorCode.BATCH_COMMIT_ERROR: EXIT_VCS_FAILURE,
}


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Simple progress indicator for user feedback."""

    def __init__(self, message: str):
        self.message = message
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        click.echo(f"⠋ {self.message}...", nl=False)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.time() - self.start_time
        click.echo(f"\r✓ {self.message} (took {elapsed:.1f}s)")
        return False


def print_step(step_num: int, total_steps: int, message: str):
    click.echo(f"\n{'='*60}")
    click.echo(f"Step {step_num}/{total_steps}: {message}")
    click.echo(f"{'='*60}")


def print_info(message: str, indent: int = 0):
    click.echo(f"{'  ' * indent}ℹ {message}")


def print_success(message: str, indent: int = 0):
    click.echo(f"{'  ' * indent}✓ {message}")


def print_warning(message: str, indent: int = 0):
    click.echo(f"{'  ' * indent}⚠ {message}")


def print_error(message: str, indent: int = 0):
    click.echo(f"{'  ' * indent}✗ {message}", err=True)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

def configure_logging(verbose: bool, level_name: Optional[str] = None) -> None:
    # force=True: repeated invocations reconfigure the handlers.
    level = logging.DEBUG if verbose else getattr(logging, (level_name or "info").upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", force=True)


def build_engine(verbose: bool) -> Tuple[ChangeEngine, dict]:
    """Locate the repository, load its configuration and build an engine.

    Raises
    ------
    click.exceptions.Exit
        With ``EXIT_NO_REPO`` or ``EXIT_CONFIG_ERROR``.
    """
    configure_logging(verbose)

    repo_root = GitClient.find_repo_root(Path.cwd())
    if repo_root is None:
        print_error("No Git repository found in current directory or parent directories.")
        raise click.exceptions.Exit(EXIT_NO_REPO)

    try:
        config = load_config(repo_root)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

    configure_logging(verbose, config["log_level"])
    logger.debug("Repository root: %s, configuration: %s", repo_root, config)

    provider = GitClient(repo_root, timeout=float(config["git_timeout"]))
    engine = ChangeEngine(
        provider,
        StdLogger(),
        grouper=ChangeGrouper(threshold=float(config["similarity_threshold"])),
        remote=config["remote"],
    )
    return engine, config


# ---------------------------------------------------------------------------
# Group review
# ---------------------------------------------------------------------------

def show_group(group: ChangeGroup, group_num: int, total_groups: int) -> None:
    message = group.suggested_message
    click.echo(f"\n{'─'*60}")
    click.echo(f"📦 Commit Group {group_num}/{total_groups} (similarity {group.similarity:.2f})")
    click.echo(f"{'─'*60}")
    click.echo(f"\n🏷️  Type: {click.style(message.type, fg='cyan', bold=True)}")
    if message.scope:
        click.echo(f"   Scope: {message.scope}")
    click.echo(f"\n📄 Affected files ({len(group.files)}):")
    for change in group.files:
        click.echo(f"   • {change.status} {change.path} (+{change.additions}/-{change.deletions})")
    click.echo(f"\n💬 Proposed commit message:\n   {message.full}")


def edit_message(original: str) -> str:
    """Let the user edit ``original`` in $EDITOR, or line by line without one."""
    editor = os.environ.get("EDITOR")
    if editor:
        print_info("Opening editor...")
        with tempfile.NamedTemporaryFile(mode="w+", delete=False, suffix=".txt", encoding="utf-8") as tmp:
            tmp.write(original)
            tmp_path = tmp.name
        try:
            subprocess.run([editor, tmp_path], check=True)
            with open(tmp_path, "r", encoding="utf-8") as f:
                edited = f.read().strip()
        except (OSError, subprocess.CalledProcessError) as exc:
            print_error(f"Editor failed: {exc}")
            edited = ""
        finally:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
    else:
        click.echo("\n   💡 No EDITOR environment variable set.")
        click.echo("   Enter your commit message below.")
        click.echo("   End with a line containing only a period (.)")
        lines: List[str] = []
        while True:
            line = click.prompt("   ", default="", show_default=False)
            if line.strip() == ".":
                break
            lines.append(line)
        edited = "\n".join(lines).strip()

    if not edited:
        print_warning("Empty message, using original")
        return original
    print_success("Message edited successfully")
    return edited


def prompt_user(group: ChangeGroup, group_num: int, total_groups: int) -> Optional[ChangeGroup]:
    """Ask whether to accept, edit or decline a group.

    Returns the group to commit (with the edited message, if any) or
    ``None`` when it is declined.
    """
    show_group(group, group_num, total_groups)
    click.echo("")
    choice = click.prompt(
        "   Choose action",
        type=click.Choice(["A", "E", "D", "a", "e", "d"], case_sensitive=False),
        default="A",
        show_choices=True,
        show_default=True,
    ).strip().lower()

    if choice == "d":
        print_warning("Declined commit group")
        return None
    if choice == "e":
        edited = edit_message(group.suggested_message.full)
        message = dataclasses.replace(group.suggested_message, full=edited)
        return dataclasses.replace(group, suggested_message=message)
    print_success("Accepted commit group")
    return group


def make_approver(auto_accept: bool):
    def approve(groups: List[ChangeGroup]) -> List[ChangeGroup]:
        print_success(f"Planned {len(groups)} commit group{'s' if len(groups) != 1 else ''}")
        approved: List[ChangeGroup] = []
        for idx, group in enumerate(groups, start=1):
            if auto_accept:
                show_group(group, idx, len(groups))
                approved.append(group)
                continue
            reviewed = prompt_user(group, idx, len(groups))
            if reviewed is not None:
                approved.append(reviewed)
        return approved

    return approve


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def print_inbound(report: InboundChanges) -> None:
    summary = report.summary
    click.echo(f"\n🌐 {report.remote}/{report.branch}: {summary.description}")
    print_info(
        f"Inbound files: {report.total_inbound}, local staged files: {report.total_local}",
        indent=1,
    )
    counts = summary.conflicts
    print_info(f"Conflicts - high: {counts.high}, medium: {counts.medium}, low: {counts.low}", indent=1)

    for conflict in report.conflicts:
        colour = "red" if conflict.severity == "high" else "yellow"
        click.echo(
            f"   {click.style(conflict.severity.upper(), fg=colour, bold=True)} "
            f"{conflict.path} (local {conflict.local_status} ~{conflict.local_changes}, "
            f"remote {conflict.remote_status} ~{conflict.remote_changes})"
        )

    if summary.file_types:
        kinds = ", ".join(f"{ext}: {count}" for ext, count in summary.file_types.items())
        print_info(f"File types: {kinds}", indent=1)

    click.echo("\n📋 Recommendations:")
    for rec in summary.recommendations:
        click.echo(f"   {rec}")
    click.echo(f"\n🔗 {report.diff_link}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="smartcheckin")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """🚀 Group pending changes into commits and check the remote before pulling."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show branch and working tree counts."""
    engine, _ = build_engine(ctx.obj["verbose"])
    result = engine.status()
    level, text = format_result_message("status", result)
    if level == "error":
        print_error(text)
        raise click.exceptions.Exit(EXIT_VCS_FAILURE)
    print_info(text)


@main.command()
@click.option("--yes", "yes", is_flag=True, help="Accept all commit groups without prompting.")
@click.pass_context
def commit(ctx: click.Context, yes: bool) -> None:
    """Group pending changes and commit each approved group."""
    engine, config = build_engine(ctx.obj["verbose"])
    auto_accept = yes or bool(config["auto_approve"])

    print_step(1, 2, "Analyzing and Reviewing Changes")
    if auto_accept:
        print_info("Auto-accept mode enabled - accepting all groups")
    result = engine.smart_commit(approve=make_approver(auto_accept))

    print_step(2, 2, "Summary")
    level, text = format_result_message("smart-commit", result)
    if level == "error":
        code = result.error.code
        if code == ErrorCode.NO_CHANGES:
            print_warning(text)
        else:
            print_error(text)
            logger.debug("Smart commit failure: %s", result.error)
        raise click.exceptions.Exit(COMMIT_EXIT_CODES.get(code, EXIT_GENERIC_ERROR))

    for info in result.value.commits:
        print_success(f"{info.hash[:7]} {info.message} ({len(info.files)} file(s))")
    print_info(text)
    click.echo("\n🎉 All done! Your changes have been committed successfully.\n")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.pass_context
def inbound(ctx: click.Context, as_json: bool) -> None:
    """Fetch the remote and report paths likely to conflict on pull."""
    engine, _ = build_engine(ctx.obj["verbose"])
    if as_json:
        result = engine.analyze_inbound()
    else:
        with ProgressIndicator("Fetching and analyzing remote changes"):
            result = engine.analyze_inbound()

    level, text = format_result_message("inbound", result)
    if level == "error":
        print_error(text)
        print_info(result.error.message, indent=1)
        raise click.exceptions.Exit(EXIT_VCS_FAILURE)
    if as_json:
        click.echo(json.dumps(result.value.to_dict(), indent=2, ensure_ascii=False))
        return
    print_inbound(result.value)
