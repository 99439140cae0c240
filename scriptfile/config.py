from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import re
from typing import Optional

from .logging import logger
from .shell import ShellPolicy, SYSTEM_DEFAULT_SHELL
from .utility import construct, load_data, read_from_file


log = logger()

PYPROJECT_SECTION = ["tool", "scriptfile"]


@dataclass
class Config:
    file: str = "scriptfile"
    shell: ShellPolicy = ShellPolicy.ENVIRONMENT
    default_shell: str = SYSTEM_DEFAULT_SHELL
    echo: bool = True

    @staticmethod
    def read(config_file: Optional[str] = None) -> Config:
        """Read configuration from `config_file`, which may carry a `[...]`
        suffix naming a (dotted) section. Without a config file, the
        `[tool.scriptfile]` section of `pyproject.toml` is used if there is
        one."""
        if config_file is not None:
            if m := re.match(r"([^\[\]]+)\[([^\[\]\s]+)\]", config_file):
                return read_from_file(Config, Path(m.group(1)), m.group(2))
            return read_from_file(Config, Path(config_file))

        pyproject = Path("pyproject.toml")
        if not pyproject.exists():
            return Config()

        data = load_data(pyproject)
        for s in PYPROJECT_SECTION:
            if s not in data:
                log.debug("no `[tool.scriptfile]` section in `pyproject.toml`")
                return Config()
            data = data[s]
        return construct(Config, data)
