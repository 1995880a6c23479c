# cli.py
from __future__ import annotations

import os
import sys
from typing import NoReturn

import click

from sparsedep.build import Build
from sparsedep.errors import ConfigurationError, PreconditionFailure
from sparsedep.loader import DEFAULT_BUILD_FILE, load_build
from sparsedep.pathsearch import git_exe_name, search_for_executable
from sparsedep.process import FATAL_EXIT_CODE
from sparsedep.ui.console import Console, get_console, set_console


MISSING_EDGE_HINT = "Declare the dependency with b.depend_on(step, checkout.node) before asking for its path."


def _report_build_error(ctx, e: Exception, title: str, suggestion: str | None = None) -> NoReturn:
    console = get_console()
    console.print_error(title, str(e), suggestion=suggestion)
    if ctx.obj.get("debug", False):
        console.print_exception(e)
    sys.exit(FATAL_EXIT_CODE)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show commands, stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """sparsedep: fetch a few directories of a git repository as a build step."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.argument("url")
@click.option("--dir", "directories", multiple=True, required=True, help="Directory to check out (repeatable, order kept)")
@click.option("--branch", default=None, help="Branch to clone and pull (pull defaults to main)")
@click.option("--dest", default=None, help="Destination path (defaults to <build root>/dep/<repo name>)")
@click.option("--git", "git_path", default=None, help="git executable (defaults to the one on PATH)")
@click.option("--build-root", default=".", show_default=True, help="Build root directory")
@click.pass_context
def fetch(ctx, url, directories, branch, dest, git_path, build_root):
    """Sparse-check-out DIRECTORIES of URL and print the local path."""
    console = get_console()
    try:
        build = Build(build_root)
        step = build.sparse_checkout(
            url,
            directories,
            git_path=git_path,
            branch=branch,
            local_path=dest,
        )
        results = build.run()
        console.print_results(results)
        console.print_info(str(step.path))
    except ConfigurationError as e:
        _report_build_error(
            ctx, e, "Invalid configuration",
            suggestion="Install git or pass it explicitly:\n  sparsedep fetch <url> --dir <dir> --git /path/to/git",
        )
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)


@cli.command()
@click.option(
    "--build",
    "build_file",
    default=DEFAULT_BUILD_FILE,
    show_default=True,
    help="Build file defining build(b)",
)
@click.option("--build-root", default=".", show_default=True, help="Build root directory")
@click.option("--workers", default=None, type=int, help="Number of parallel workers per stage")
@click.pass_context
def run(ctx, build_file, build_root, workers):
    """Run every step of a build file."""
    console = get_console()
    try:
        build = load_build(build_file, Build(build_root))
    except ConfigurationError as e:
        _report_build_error(ctx, e, "Invalid configuration")
    except PreconditionFailure as e:
        _report_build_error(
            ctx, e, "Broken build description",
            suggestion=MISSING_EDGE_HINT,
        )
    except (FileNotFoundError, ValueError, TypeError) as e:
        console.print_error(
            "Failed to load build file",
            f"Could not load build from {build_file}",
            details=[str(e)],
        )
        if ctx.obj.get("debug", False):
            console.print_exception(e)
        sys.exit(1)

    try:
        console.print_build_started(str(build.build_root), build_file, len(build.graph))
        results = build.run(max_workers=workers)
        console.print_results(results)
    except PreconditionFailure as e:
        _report_build_error(
            ctx, e, "Broken build description",
            suggestion=MISSING_EDGE_HINT,
        )
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)


@cli.command()
@click.argument("name", required=False)
@click.pass_context
def which(ctx, name):
    """Resolve an executable (default: git) through PATH."""
    try:
        click.echo(search_for_executable(os.environ, name or git_exe_name()))
    except ConfigurationError as e:
        _report_build_error(ctx, e, "Executable not found")


if __name__ == "__main__":
    cli()
