from __future__ import annotations
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Type, TypeGuard, TypeVar, Union, cast
from dataclasses import is_dataclass
import json
import tomllib
import types
import typing

from .errors import HelpfulUserError, InputError


T = TypeVar("T")


def isgeneric(annot):
    return typing.get_origin(annot) and hasattr(annot, "__args__")


def is_optional_type(dtype: Type[Any]) -> TypeGuard[Type[Optional[Any]]]:
    return (
        isgeneric(dtype)
        and typing.get_origin(dtype) in (Union, types.UnionType)
        and typing.get_args(dtype)[1] is types.NoneType
    )


def construct(annot: Any, json: Any) -> Any:
    try:
        return _construct(annot, json)
    except (AssertionError, ValueError, KeyError) as e:
        raise InputError(annot, json) from e


def _construct(annot: Type[T], json: Any) -> T:
    """Construct an object of a given type from JSON-like data.

    The `annot` type should be one of: str, bool, int, Path, list[T],
    Optional[T], an Enum, or a dataclass. Enums are matched on their value or,
    case insensitive, on their name.
    """
    if annot is str:
        assert isinstance(json, str)
        return cast(T, json)
    if annot is bool:
        assert isinstance(json, bool)
        return cast(T, json)
    if annot is int:
        assert isinstance(json, int) and not isinstance(json, bool)
        return cast(T, json)
    if annot is Any:
        return cast(T, json)
    if annot is Path and isinstance(json, str):
        return cast(T, Path(json))
    if isgeneric(annot) and typing.get_origin(annot) is list:
        assert isinstance(json, list)
        return cast(T, [construct(typing.get_args(annot)[0], item) for item in json])
    if is_optional_type(annot):
        if json is None:
            return cast(T, None)
        else:
            return cast(T, construct(typing.get_args(annot)[0], json))
    if is_dataclass(annot):
        assert isinstance(json, dict)
        arg_annot = typing.get_type_hints(annot)
        if unknown := [k for k in json if k not in arg_annot]:
            raise ValueError(f"Unknown keys: {unknown}")
        args = {k: construct(arg_annot[k], json[k]) for k in json}
        return cast(T, annot(**args))
    if isinstance(json, str) and isinstance(annot, type) and issubclass(annot, Enum):
        options = {opt.name.lower(): opt for opt in annot}
        options.update({str(opt.value): opt for opt in annot})
        return cast(T, options.get(json) or options[json.lower()])
    raise ValueError(f"Couldn't construct {annot} from {repr(json)}")


def load_data(path: Path) -> Any:
    if not path.exists():
        raise HelpfulUserError(f"File not found: {path}")
    with open(path, "rb") as f:
        if path.suffix == ".toml":
            return tomllib.load(f)
        elif path.suffix == ".json":
            return json.load(f)
        else:
            raise HelpfulUserError(f"Unrecognized file format: {path}")


def read_from_file(data_type: Type[T], path: Path, section: Optional[str] = None) -> T:
    """Read data from given `path` in given `section`. The path should refer to
    a TOML or JSON file that decodes to a `data_type` object. If `section` is
    given, only that section is decoded. The `section` string may contain
    periods to indicate deeper nesting.

    Example:

    ```python
    read_from_file(Config, Path("./pyproject.toml"), "tool.scriptfile")
    ```
    """
    data = load_data(path)
    try:
        if section is not None:
            for s in section.split("."):
                data = data[s]
    except KeyError as e:
        raise HelpfulUserError(
            f"Data file `{path}` should contain section `{section}`."
        ) from e

    return construct(data_type, data)
