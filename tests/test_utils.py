"""Tests for plugcli.cli.utils error presentation."""

from plugcli.cli.utils import format_error, print_message, report_error, to_error
from plugcli.exceptions import ExecutionError, ExitCodeError, UnknownRejectionError


class TestToError:
    """Tests for to_error()."""

    def test_exception_unchanged(self):
        err = ValueError("bad")
        assert to_error(err) is err

    def test_single_member_group_unwrapped(self):
        inner = ExecutionError("inner")
        assert to_error(ExceptionGroup("group", [inner])) is inner

    def test_nested_groups_unwrapped(self):
        inner = KeyError("k")
        group = ExceptionGroup("outer", [ExceptionGroup("inner", [inner])])
        assert to_error(group) is inner

    def test_multi_member_group_kept(self):
        group = ExceptionGroup("group", [ValueError("a"), KeyError("b")])
        assert to_error(group) is group

    def test_non_exception_wrapped(self):
        err = to_error("a plain string")
        assert isinstance(err, UnknownRejectionError)
        assert err.rejection == "a plain string"

    def test_base_exception_wrapped(self):
        interrupt = KeyboardInterrupt()
        err = to_error(interrupt)
        assert isinstance(err, UnknownRejectionError)
        assert err.rejection is interrupt


class TestFormatError:
    """Tests for format_error()."""

    def test_plugcli_error(self):
        assert format_error(ExecutionError("disk full")) == "Error: disk full"

    def test_other_error_shows_type(self):
        assert format_error(ValueError("bad value")) == "Error: ValueError: bad value"

    def test_verbose_includes_traceback(self):
        try:
            raise ExecutionError("disk full")
        except ExecutionError as e:
            text = format_error(e, verbose=True)
        assert "Traceback (most recent call last)" in text
        assert "disk full" in text


class TestReportError:
    """Tests for report_error()."""

    def test_prints_to_stderr(self, capsys):
        assert report_error(ExecutionError("disk full")) == 1

        captured = capsys.readouterr()
        assert "Error: disk full" in captured.err
        assert captured.out == ""

    def test_exit_code_error_keeps_code(self, capsys):
        assert report_error(ExitCodeError(7)) == 7
        assert "Child exited with code 7" in capsys.readouterr().err


class TestPrintMessage:
    """Tests for print_message()."""

    def test_plain_when_not_a_terminal(self, capsys):
        print_message("Invalid command: db status", use_rich=False)
        assert capsys.readouterr().err == "Invalid command: db status\n"

    def test_rich_output(self, capsys):
        print_message("Invalid command: db status", use_rich=True)
        assert "Invalid command: db status" in capsys.readouterr().err
