from dataclasses import dataclass

import pytest
from hypothesis import given
from hypothesis.strategies import booleans, builds, from_regex, integers, lists, tuples

from scriptfile.errors import MalformedDefinitionFile
from scriptfile.parser import parse
from scriptfile.task import Task


example = """# Example definition file

greet name
    echo "hello $name"

# variadic
build src ...
    cc -o "$src.out" "$src" "$@"

    echo done


clean
  rm -f *.out
"""


def test_example():
    tasks = parse(example)
    assert tasks == [
        Task("greet", ["name"], False, '    echo "hello $name"'),
        Task("build", ["src"], True, '    cc -o "$src.out" "$src" "$@"\n\n    echo done'),
        Task("clean", [], False, "  rm -f *.out"),
    ]


def test_empty():
    assert parse("") == []
    assert parse("# nothing here\n\n   \n") == []


def test_no_final_newline():
    assert parse("hello\n echo hi") == [Task("hello", [], False, " echo hi")]


def test_crlf():
    assert parse("hello who\r\n echo $who\r\n") == [Task("hello", ["who"], False, " echo $who")]


def test_duplicate_names():
    tasks = parse("greet\n echo hi\ngreet name\n echo hi $name\n")
    assert [t.signature for t in tasks] == ["greet", "greet name"]


def test_header_whitespace():
    tasks = parse("copy   src\tdst  \n cp $src $dst\n")
    assert tasks[0].name == "copy"
    assert tasks[0].parameters == ["src", "dst"]


def test_separators_inside_body():
    for sep in ("\x0c", "\x0b", "\x85", "\u2028"):
        (task,) = parse(f"say\n echo \"a{sep}b\"\n")
        assert task.body == f" echo \"a{sep}b\""
        assert task.preview() == [f"echo \"a{sep}b\""]


def test_variadic_marker_only():
    (task,) = parse("run ...\n exec \"$@\"\n")
    assert task.parameters == []
    assert task.variadic


@dataclass
class Malformed:
    text: str
    line_number: int


malformed = [
    # body line before any header
    Malformed("    echo hi\ngreet\n echo hi\n", 1),
    # two consecutive headers
    Malformed("greet\nhello\n echo hi\n", 1),
    # comment between header and body
    Malformed("greet name\n# stray\n    echo $name\n", 1),
    # body after a comment that closed the previous task
    Malformed("greet\n echo hi\n# comment\n echo again\n", 4),
    # header at the end of the file
    Malformed("greet\n echo hi\nclean\n\n", 3),
    # marker in the middle
    Malformed("build ... src\n echo $src\n", 1),
    # stray `#` in a header
    Malformed("greet name # says hi\n echo $name\n", 1),
    Malformed("greet#\n echo hi\n", 1),
    # parameters must be usable as environment variables
    Malformed("set a=b\n echo $a\n", 1),
    Malformed("clean\n true\nrun 1st\n echo $1st\n", 3),
]


@pytest.mark.parametrize("test", malformed)
def test_malformed(test):
    with pytest.raises(MalformedDefinitionFile) as e:
        parse(test.text)
    assert e.value.line_number == test.line_number


names = from_regex(r"[a-z][a-z0-9_-]{0,8}", fullmatch=True)
parameters = from_regex(r"[a-zA-Z_][a-zA-Z0-9_]{0,8}", fullmatch=True)
body_lines = builds(
    lambda indent, text: " " * indent + text,
    integers(min_value=1, max_value=8),
    from_regex(r"[a-zA-Z0-9$\"'= ]{0,16}[a-zA-Z0-9]", fullmatch=True),
)
tasks = builds(
    lambda sig, variadic, body: Task(sig[0], sig[1], variadic, "\n".join(body)),
    tuples(names, lists(parameters, max_size=4)),
    booleans(),
    lists(body_lines, min_size=1, max_size=5),
)


@given(lists(tasks, max_size=6))
def test_round_trip(ts):
    text = "\n".join(str(t) for t in ts) + "\n"
    assert parse(text) == ts


@given(lists(tasks, min_size=1, max_size=4))
def test_round_trip_with_comments(ts):
    text = "\n\n# comment\n".join(str(t) for t in ts) + "\n\n"
    assert parse(text) == ts
