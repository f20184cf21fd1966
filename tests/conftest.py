"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest

from constscan.parsing import GoParser


@pytest.fixture
def write_go(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper that writes a Go file relative to tmp_path."""

    def _write(relative: str, content: str) -> Path:
        filepath = tmp_path / relative
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_text(content, encoding="utf-8")
        return filepath

    return _write


@pytest.fixture
def go_parser() -> GoParser:
    """A tree-sitter Go parser."""
    return GoParser()


@pytest.fixture
def greeting_project(write_go: Callable[[str, str], Path], tmp_path: Path) -> Path:
    """Two-file project: one ASCII constant plus an int, one Japanese constant."""
    write_go(
        "a.go",
        'package a\n'
        '\n'
        'const Greeting = "hello"\n'
        'const X = 42\n',
    )
    write_go(
        "sub/b.go",
        'package sub\n'
        '\n'
        '// Title is shown on the start screen.\n'
        'const Title = "こんにちは"\n',
    )
    return tmp_path


@pytest.fixture
def sample_go_source() -> str:
    """A Go file covering matching and non-matching constant forms."""
    return '''package sample

import "fmt"

const Greeting = "hello"
const Count = 42
const Typed string = "typed"

const (
	First  = "first"
	Alias  = First
	Joined = "a" + "b"
	Paren  = ("paren")
	Called = len("abc")
	Rune   = 'é'
	Pair1, Pair2 = "one", "二"
	Raw    = `raw ü`
)

const (
	Zero = iota
	One
)

var Skipped = "variable, not constant é"

func main() {
	const Inner = "nested é"
	fmt.Println(Inner)
}
'''
