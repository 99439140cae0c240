from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from rich.console import Console

from .errors import DefinitionFileMissing, HelpfulUserError, NoMatchingTask
from .logging import logger
from .parser import parse
from .shell import ShellPolicy, SYSTEM_DEFAULT_SHELL, resolve_shell
from .task import Task


log = logger()


@dataclass
class Program:
    text: str
    tasks: list[Task] = field(default_factory=list)

    @staticmethod
    def read(path: Path) -> Program:
        if not path.exists():
            raise DefinitionFileMissing(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise HelpfulUserError(f"Can't read `{path}`: {e}") from e
        return Program.from_str(text)

    @staticmethod
    def from_str(text: str) -> Program:
        tasks = parse(text)
        log.debug(f"parsed {len(tasks)} tasks")
        return Program(text, tasks)

    def select(self, name: str, arguments: list[str]) -> Task:
        """Find the first task, in order of definition, named `name` that
        accepts as many arguments as given."""
        for task in self.tasks:
            if task.matches(name, arguments):
                log.debug(f"selected `{task.signature}`")
                return task

        candidates = [t.signature for t in self.tasks if t.name == name]
        raise NoMatchingTask(name, len(arguments), candidates)

    async def run(
        self,
        name: str,
        arguments: list[str],
        *,
        policy: ShellPolicy = ShellPolicy.ENVIRONMENT,
        default_shell: str = SYSTEM_DEFAULT_SHELL,
        console: Optional[Console] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> int:
        task = self.select(name, arguments)
        if console is not None:
            task.print(console)
        shell = resolve_shell(policy, environ, default_shell)
        log.debug(f"using shell `{shell.command}`")
        return await task.run(arguments, shell=shell, environ=environ)
