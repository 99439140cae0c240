from .program import Program
from .parser import parse
from .task import Task
from .shell import Shell, ShellPolicy, resolve_shell
from .cli import scriptfile

__all__ = ["Program", "parse", "Task", "Shell", "ShellPolicy", "resolve_shell", "scriptfile"]
