"""Command-line interface for textcheck."""

import logging
from pathlib import Path

import click

from textcheck import __version__, io_utils
from textcheck.checker import TextChecker, kinds_table
from textcheck.config import find_config, load_config
from textcheck.errors import TextCheckError
from textcheck.models import Severity
from textcheck.runner import run_checks
from textcheck.utils import (
    dump_json_line,
    filter_files_by_severity,
    format_text_line,
    summarize_severities,
)

SEVERITY_CHOICES = [severity.value for severity in Severity]


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Log debugging output to stderr.")
@click.pass_context
def main(ctx, debug):
    """Check text files for newline, tab, line length and whitespace problems."""
    ctx.ensure_object(dict)
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _build_checker(config_path, max_line_length, commit_hook) -> TextChecker:
    path = Path(config_path) if config_path else find_config(Path.cwd())
    config = load_config(
        path,
        max_line_length=max_line_length,
        commit_hook_mode=commit_hook,
    )
    return TextChecker(config)


def _write_text(envelope: dict, output_handle) -> None:
    for entry in envelope["files"]:
        for item in entry["items"]:
            output_handle.write(format_text_line(entry["path"], item) + "\n")


@main.command()
@click.argument("paths", nargs=-1, required=True)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    show_default="stdout",
    help="Output file path or '-' for stdout.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Show progress and a summary of findings.",
)
@click.option(
    "--fail-on-findings",
    "-f",
    is_flag=True,
    help="Exit with status 1 if warning or error findings are present.",
)
@click.option(
    "--severity",
    type=click.Choice(SEVERITY_CHOICES, case_sensitive=False),
    default=Severity.AUTOFIX.value,
    show_default=True,
    help="Minimum severity to include in the output.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Configuration file (defaults to .textcheck.toml or pyproject.toml).",
)
@click.option(
    "--max-line-length",
    type=click.IntRange(min=1),
    default=None,
    help="Override the configured maximum line length.",
)
@click.option(
    "--commit-hook",
    is_flag=True,
    help="Run as a commit hook; enables the @no" "commit marker check.",
)
@click.option("--fix", is_flag=True, help="Write autofixes back to the checked files.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default="json",
    show_default=True,
    help="Output format.",
)
def check(
    paths,
    output,
    verbose,
    fail_on_findings,
    severity,
    config_path,
    max_line_length,
    commit_hook,
    fix,
    output_format,
):
    """Check files for text style problems."""

    try:
        checker = _build_checker(config_path, max_line_length, commit_hook)
    except TextCheckError as exc:
        raise click.ClickException(str(exc)) from exc

    inputs = io_utils.resolve_inputs(paths)
    output_handle, should_close = io_utils.resolve_output_handle(output, mode="w")

    try:
        if verbose:
            click.echo(f"Processing {len(inputs)} file(s)...", err=True)
            for source in inputs:
                click.echo(f"  - {source.display_name}", err=True)

        try:
            envelope = run_checks(inputs, checker, fix=fix)
        except TextCheckError as exc:
            raise click.ClickException(str(exc)) from exc

        filtered_files = filter_files_by_severity(envelope.get("files", []), severity.lower())
        summary = summarize_severities(filtered_files)
        envelope = {**envelope, "files": filtered_files}

        if output_format.lower() == "text":
            _write_text(envelope, output_handle)
        else:
            dump_json_line(envelope, output_handle)

        if verbose:
            click.echo(
                "Summary: "
                f"autofix={summary['autofix']} warning={summary['warning']} "
                f"error={summary['error']}",
                err=True,
            )
            if fix:
                fixed = sum(entry.get("fixed", 0) for entry in filtered_files)
                click.echo(f"Applied {fixed} fix(es)", err=True)

        if fail_on_findings and (summary["warning"] or summary["error"]):
            raise SystemExit(1)
    finally:
        if should_close:
            output_handle.close()


@main.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Configuration file used to resolve severity overrides.",
)
def kinds(config_path):
    """List the issue kinds with their display names and severities."""

    try:
        checker = _build_checker(config_path, None, False)
    except TextCheckError as exc:
        raise click.ClickException(str(exc)) from exc

    for kind_id, name, severity in kinds_table(checker):
        click.echo(f"{kind_id}  {severity:<8} {name}")


if __name__ == "__main__":
    main()
