"""Rubric CLI entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from rubric import __version__


@click.group()
@click.version_option(version=__version__, prog_name="rubric")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """Rubric - architecture-conformance checker for .rux constraint files."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json", "porcelain"]),
    default=None,
    help="Output format (default: rich if TTY, porcelain if piped).",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit 1 on warnings as well as errors.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: rubric.yml in the project root).",
)
@click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: current directory).",
)
def check(
    *,
    fmt: str | None,
    strict: bool,
    config_path: Path | None,
    project: Path | None,
) -> None:
    """Validate source files against every .rux constraint file.

    Exit codes: 0 = no errors (warnings allowed unless --strict),
    1 = errors found, 2 = configuration or traversal error.
    """
    from rubric.config import ConfigError, load_config
    from rubric.validation.engine import check_project
    from rubric.validation.report import exit_code, format_json, format_porcelain, render_report

    project_root = (project or Path.cwd()).resolve()

    if fmt is None:
        fmt = "rich" if sys.stdout.isatty() else "porcelain"

    try:
        config = load_config(project_root, config_path)
        result = check_project(project_root, config=config)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)
    except OSError as exc:
        click.echo(f"Error: cannot scan {project_root}: {exc}", err=True)
        sys.exit(2)

    if fmt == "rich":
        from rich.console import Console

        render_report(result, Console())
    else:
        output = format_json(result) if fmt == "json" else format_porcelain(result)
        if output:
            click.echo(output)

    code = exit_code(result, strict=strict)
    if code:
        sys.exit(code)


@main.command()
@click.argument("rux_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="JSON output.")
def parse(rux_file: Path, *, as_json: bool) -> None:
    """Show the rule parsed from a .rux file, with any diagnostics."""
    from rubric.constraints.parser import load_rule

    parsed = load_rule(rux_file)

    if as_json:
        payload = {
            "rule": parsed.rule.to_dict(),
            "diagnostics": [
                {"line": d.line, "column": d.column, "message": d.message}
                for d in parsed.diagnostics
            ],
        }
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    rule = parsed.rule
    click.echo(f"Module: {rule.module_name or '(none)'}")
    click.echo(f"Location: {rule.location or '(none, rule is inert)'}")
    click.echo(f"Component: {rule.component_type if rule.is_component else 'no'}")
    for label, values in (
        ("Allowed imports", rule.allowed_imports),
        ("Denied imports", rule.denied_imports),
        ("Denied operations", rule.denied_operations),
        ("Denied exports", rule.denied_exports),
    ):
        if values:
            click.echo(f"{label}: {', '.join(values)}")
    if rule.file_constraints.max_lines is not None:
        click.echo(f"Max lines: {rule.file_constraints.max_lines}")
    for diagnostic in parsed.diagnostics:
        click.echo(f"{rux_file}:{diagnostic}", err=True)
