from argparse import ArgumentParser, REMAINDER
from pathlib import Path
import sys
from typing import Optional
import argh  # type: ignore
import asyncio

from rich.console import Console
from rich_argparse import RichHelpFormatter
from rich.table import Table
from rich.text import Text

from .config import Config
from .errors import UserError
from .logging import logger, configure_logger
from .program import Program
from .shell import ShellPolicy
from .version import __version__

log = logger()


def print_tasks(program: Program):
    t = Table(title="Tasks", header_style="italic green", show_edge=False)
    t.add_column("task", style="bold yellow")
    t.add_column("script")
    for task in program.tasks:
        first, *rest = task.preview()
        t.add_row(Text(task.signature), Text(first + (" ..." if rest else "")))
    console = Console()
    console.print(t)


def main(
    command: list[str],
    *,
    input_file: Optional[str] = None,
    config_file: Optional[str] = None,
    system_shell: bool = False,
    quiet: bool = False,
    list_only: bool = False,
) -> int:
    config = Config.read(config_file)
    program = Program.read(Path(input_file or config.file))

    if list_only:
        print_tasks(program)
        return 0

    if not command:
        print(program.text, end="", file=sys.stderr)
        return 0

    name, *arguments = command
    policy = ShellPolicy.SYSTEM_DEFAULT if system_shell else config.shell
    console = Console(stderr=True, highlight=False) if config.echo and not quiet else None
    return asyncio.run(program.run(
        name,
        arguments,
        policy=policy,
        default_shell=config.default_shell,
        console=console,
    ))


@argh.arg("command", nargs=REMAINDER, help="name of the task to run, followed by its arguments")
@argh.arg("-f", "--file", help="definition file, by default `scriptfile`")
@argh.arg(
    "-c",
    "--config",
    help="TOML or JSON config file, use a `[...]` suffix to indicate a subsection.",
)
@argh.arg("--system-shell", help="run tasks with the system default shell instead of $SHELL")
@argh.arg("-q", "--quiet", help="don't echo the task before running it")
@argh.arg("-l", "--list-tasks", help="show the tasks in the definition file")
@argh.arg("-v", "--version", help="print version number and exit")
@argh.arg("--debug", help="more verbose logging")
def scriptfile(
    command: list[str],
    *,
    file: Optional[str] = None,
    config: Optional[str] = None,
    system_shell: bool = False,
    quiet: bool = False,
    list_tasks: bool = False,
    version: bool = False,
    debug: bool = False
):
    """Run one of the tasks in the definition file. Without a task, print
    the definition file."""
    if version:
        print(f"scriptfile {__version__}")
        sys.exit(0)

    configure_logger(debug)
    try:
        sys.exit(main(
            command,
            input_file=file,
            config_file=config,
            system_shell=system_shell,
            quiet=quiet,
            list_only=list_tasks,
        ))
    except UserError as e:
        log.error(f"Failed: {e}")
        sys.exit(e.exit_code)
    except KeyboardInterrupt:
        log.error("Interrupted.")
        sys.exit(130)


def cli(argv: Optional[list[str]] = None):
    parser = ArgumentParser(formatter_class=RichHelpFormatter)
    argh.set_default_command(parser, scriptfile)
    argh.dispatch(parser, argv=argv)


if __name__ == "__main__":
    cli()
