"""Parser for definition files.

A definition file is a sequence of tasks, each consisting of a header line
followed by an indented body:

```
# comments start in the first column
greet name
    echo "hello $name"

build src ...
    cc -o "$src.out" "$src" "$@"
```

The header holds the task name and its parameters; a trailing `...` makes
the task variadic. Body lines start with a space, blank lines are kept inside
a body but dropped at its end. The whole file is checked before any task is
returned.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import re

from .errors import MalformedDefinitionFile
from .task import Task, VARIADIC_MARKER, is_blank


PARAMETER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class State(Enum):
    BEFORE_HEADER = 1
    IN_BODY = 2


def is_comment(line: str) -> bool:
    return line.startswith("#")


def is_body_line(line: str) -> bool:
    return line.startswith(" ") or is_blank(line)


def split_lines(text: str) -> list[str]:
    """Split on `\n` only, form feeds and other separators stay in their line."""
    return [line.removesuffix("\r") for line in text.split("\n")]


@dataclass
class Header:
    line_number: int
    line: str
    body: list[str] = field(default_factory=list)

    def to_task(self) -> Task:
        name, *parameters = self.line.split()
        variadic = bool(parameters) and parameters[-1] == VARIADIC_MARKER
        if variadic:
            parameters.pop()
        if VARIADIC_MARKER in parameters:
            raise MalformedDefinitionFile(
                self.line_number, self.line,
                f"`{VARIADIC_MARKER}` can only be the last parameter")
        if "#" in name:
            raise MalformedDefinitionFile(
                self.line_number, self.line, f"`#` in task name `{name}`")
        for p in parameters:
            if not PARAMETER.fullmatch(p):
                raise MalformedDefinitionFile(
                    self.line_number, self.line,
                    f"`{p}` is not a valid parameter name")

        body = list(self.body)
        while body and is_blank(body[-1]):
            body.pop()
        if not body:
            raise MalformedDefinitionFile(
                self.line_number, self.line, f"task `{name}` has no body")

        return Task(name, parameters, variadic, "\n".join(body))


def parse(text: str) -> list[Task]:
    tasks: list[Task] = []
    state = State.BEFORE_HEADER
    header: Header | None = None

    for line_number, line in enumerate(split_lines(text), start=1):
        if state is State.IN_BODY:
            assert header is not None
            if is_body_line(line):
                header.body.append(line)
                continue
            tasks.append(header.to_task())
            state = State.BEFORE_HEADER

        if is_blank(line) or is_comment(line):
            continue
        if line.startswith(" "):
            raise MalformedDefinitionFile(
                line_number, line, "indented line outside of a task body")

        header = Header(line_number, line)
        state = State.IN_BODY

    if state is State.IN_BODY:
        assert header is not None
        tasks.append(header.to_task())

    return tasks
