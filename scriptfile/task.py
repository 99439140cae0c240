from __future__ import annotations
from asyncio import create_subprocess_exec
from dataclasses import dataclass, field
import os
from typing import Mapping, Optional

from rich.console import Console
from rich.text import Text

from .errors import ShellResolutionFailed, SubprocessFailed
from .logging import logger
from .shell import Shell


log = logger()

VARIADIC_MARKER = "..."


def is_blank(line: str) -> bool:
    return not line.strip()


def leading_spaces(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


@dataclass
class Task:
    name: str
    parameters: list[str] = field(default_factory=list)
    variadic: bool = False
    body: str = ""

    @property
    def signature(self) -> str:
        marker = [VARIADIC_MARKER] if self.variadic else []
        return " ".join([self.name, *self.parameters, *marker])

    def __str__(self):
        return f"{self.signature}\n{self.body}"

    def accepts(self, arity: int) -> bool:
        if self.variadic:
            return arity >= len(self.parameters)
        return arity == len(self.parameters)

    def matches(self, name: str, arguments: list[str]) -> bool:
        return self.name == name and self.accepts(len(arguments))

    def bind(self, arguments: list[str]) -> dict[str, str]:
        return dict(zip(self.parameters, arguments))

    def extra_arguments(self, arguments: list[str]) -> list[str]:
        return arguments[len(self.parameters):]

    @property
    def indentation(self) -> int:
        """Smallest indentation among the non-blank lines of the body."""
        return min(
            (leading_spaces(line) for line in self.body.split("\n") if not is_blank(line)),
            default=0,
        )

    def preview(self) -> list[str]:
        n = self.indentation
        return [line[min(n, len(line)):] for line in self.body.split("\n")]

    def print(self, console: Console):
        for line in self.preview():
            console.print(Text("> ", style="dim") + Text(line), soft_wrap=True)

    async def run(
        self,
        arguments: list[str],
        *,
        shell: Shell,
        environ: Optional[Mapping[str, str]] = None,
    ) -> int:
        env = dict(os.environ if environ is None else environ)
        env.update(self.bind(arguments))
        argv = shell.argv(self.body, self.name, self.extra_arguments(arguments))

        log.debug(f"running `{self.signature}` with `{shell.command}`")
        try:
            proc = await create_subprocess_exec(*argv, env=env)
        except OSError as e:
            raise ShellResolutionFailed(command=shell.command, reason=e.strerror or str(e)) from e
        returncode = await proc.wait()
        log.debug(f"return-code {returncode}")

        if returncode != 0:
            raise SubprocessFailed(returncode)
        return returncode
