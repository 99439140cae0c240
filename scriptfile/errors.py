from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
import signal


class UserError(Exception):
    exit_code: int = 1

    def __str__(self):
        return "Unknown user error."


@dataclass
class HelpfulUserError(UserError):
    msg: str

    def __str__(self):
        return self.msg


@dataclass
class InputError(UserError):
    expected: Any
    got: Any

    def __str__(self):
        return f"Expected {self.expected}, got: {self.got!r}"


@dataclass
class DefinitionFileMissing(UserError):
    path: Path

    def __str__(self):
        return f"No `{self.path}` found in `{Path.cwd()}`."


@dataclass
class MalformedDefinitionFile(UserError):
    line_number: int
    line: str
    reason: str

    def __str__(self):
        return f"Malformed definition file, line {self.line_number}: {self.reason}\n" \
            f"  {self.line_number} | {self.line}"


@dataclass
class NoMatchingTask(UserError):
    name: str
    arity: int
    candidates: list[str] = field(default_factory=list)

    def __str__(self):
        plural = "" if self.arity == 1 else "s"
        msg = f"No task named `{self.name}` taking {self.arity} argument{plural}."
        if self.candidates:
            msg += " Available: " + ", ".join(f"`{c}`" for c in self.candidates)
        return msg


@dataclass
class ShellResolutionFailed(UserError):
    variable: Optional[str] = None
    command: Optional[str] = None
    reason: str = ""

    def __str__(self):
        if self.command is not None:
            return f"Can't run shell `{self.command}`: {self.reason}"
        return f"Can't find a shell: environment variable `{self.variable}` is not set."


@dataclass
class SubprocessFailed(UserError):
    returncode: int

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        if self.returncode < 0:
            return 128 - self.returncode
        return self.returncode

    def __str__(self):
        if self.returncode < 0:
            try:
                name = signal.Signals(-self.returncode).name
            except ValueError:
                name = f"signal {-self.returncode}"
            return f"process was killed by {name}"
        return f"process returned code {self.returncode}"
