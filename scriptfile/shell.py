from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import os
from typing import Mapping, Optional

from .errors import ShellResolutionFailed


SHELL_VARIABLE = "SHELL"
SYSTEM_DEFAULT_SHELL = "/bin/sh"


class ShellPolicy(Enum):
    ENVIRONMENT = "use-environment-shell"
    SYSTEM_DEFAULT = "use-system-default-shell"


@dataclass
class Shell:
    command: str
    flag: str = "-c"

    def argv(self, body: str, name: str, extra: list[str]) -> list[str]:
        """The shell receives the task name as `$0`, so that positional
        parameters `$1...` line up with the extra arguments."""
        return [self.command, self.flag, body, name, *extra]


def resolve_shell(
    policy: ShellPolicy,
    environ: Optional[Mapping[str, str]] = None,
    default: str = SYSTEM_DEFAULT_SHELL,
) -> Shell:
    if policy is ShellPolicy.SYSTEM_DEFAULT:
        return Shell(default)

    environ = os.environ if environ is None else environ
    if not (command := environ.get(SHELL_VARIABLE)):
        raise ShellResolutionFailed(SHELL_VARIABLE)
    return Shell(command)
