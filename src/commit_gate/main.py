"""CLI entrypoint for commit-gate."""

import rich_click as click

from commit_gate import __version__
from commit_gate.hooks.controllers import HooksCliController, HooksInstallCommand, HooksRunCommand
from commit_gate.hooks.errors import TaskError

click.rich_click.USE_MARKDOWN = True
HOOKS_CONTROLLER = HooksCliController()

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.version_option(version=__version__, prog_name="commit-gate")
def commit_gate() -> None:
    """Pre-commit quality gate for Dart packages."""


@commit_gate.command("run")
@click.option(
    "--fix-imports/--no-fix-imports",
    default=None,
    help="Relativize package imports and sort imports. Default: on.",
)
@click.option(
    "--format/--no-format",
    "format_",
    default=None,
    help="Format staged files with `dart format`. Default: on.",
)
@click.option(
    "--analyze/--no-analyze",
    default=None,
    help="Reject staged files with `dart analyze` findings. Default: on.",
)
@click.option(
    "--pull-up-dependencies/--no-pull-up-dependencies",
    default=None,
    help="Reject constraints lagging behind the lock file. Default: off.",
)
@click.option(
    "--continue-on-rejected/--abort-on-rejected",
    default=None,
    help="Keep running all tasks after the first rejection.",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Diagnostic logging level (stderr).",
)
def run(  # noqa: PLR0913
    fix_imports: bool | None,
    format_: bool | None,
    analyze: bool | None,
    pull_up_dependencies: bool | None,
    continue_on_rejected: bool | None,
    log_level: str | None,
) -> None:
    """Run all enabled tasks over the staged files.

    Exit status: **0** commit may proceed, **1** fixes need review or the
    commit was rejected, **2** a task failed unrecoverably.
    """

    try:
        outcome = HOOKS_CONTROLLER.run(
            HooksRunCommand(
                fix_imports=fix_imports,
                format=format_,
                analyze=analyze,
                pull_up_dependencies=pull_up_dependencies,
                continue_on_rejected=continue_on_rejected,
                log_level=log_level,
            ),
        )
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    _emit_lines(outcome.lines)
    if outcome.exit_code:
        raise SystemExit(outcome.exit_code)


@commit_gate.command("install")
@click.option(
    "--force/--no-force",
    default=False,
    show_default=True,
    help="Replace an existing pre-commit hook.",
)
def install(force: bool) -> None:
    """Install `commit-gate run` as the git pre-commit hook."""

    try:
        lines = HOOKS_CONTROLLER.install(HooksInstallCommand(force=force))
    except (TaskError, ValueError) as error:
        raise click.ClickException(str(error)) from error
    _emit_lines(lines)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    commit_gate()
