import pytest

from osproto.arguments import Arguments, TooManyArgumentsError, strip_whitespaces


def test_strip_whitespaces_both_ends():
    assert strip_whitespaces("\t  hi there \n") == "hi there"


def test_strip_whitespaces_only_spaces():
    assert strip_whitespaces(" \t\r\n\v\f") == ""


def test_strip_whitespaces_keeps_inner_spacing():
    assert strip_whitespaces("a  b") == "a  b"


def test_use_splits_words():
    arguments = Arguments(5)
    arguments.use("  ls   -l\t/tmp  ")
    assert arguments.argv == ["ls", "-l", "/tmp"]
    assert arguments.argc == 3


def test_use_on_blank_line_adds_nothing():
    arguments = Arguments(3)
    arguments.use("   \t  ")
    assert arguments.argv == []


def test_use_accumulates_across_calls():
    arguments = Arguments(4)
    arguments.use("a b")
    arguments.use("c")
    assert arguments.argv == ["a", "b", "c"]


def test_too_many_arguments_raises_and_keeps_first_ones():
    arguments = Arguments(2)
    with pytest.raises(TooManyArgumentsError):
        arguments.use("one two three")
    assert arguments.argv == ["one", "two"]


def test_exactly_max_arguments_is_accepted():
    arguments = Arguments(3)
    arguments.use("x y z")
    assert arguments.argc == arguments.max_argc


def test_clear_resets():
    arguments = Arguments(3)
    arguments.use("x y")
    arguments.clear()
    assert arguments.argc == 0
    arguments.use("z")
    assert arguments.argv == ["z"]