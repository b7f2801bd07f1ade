"""Tests for parser construction, argv splitting and argument recovery."""

import pytest

from plugcli.cli.parser import (
    COMMAND_DEST,
    build_parser,
    resolve_command_args,
    split_argv,
)
from plugcli.exceptions import InvalidCommandError
from plugcli.graph import CommandGraph


class TestSplitArgv:
    """Tests for the operand/unknown split."""

    def test_operands_only(self):
        parsed = split_argv(["db", "migrate", "up"])
        assert parsed.operands == ("db", "migrate", "up")
        assert parsed.unknown == ()

    def test_unknown_option_switches_destination(self):
        """The first unknown option and everything after it are unknown."""
        parsed = split_argv(["db", "migrate", "--force", "up"])
        assert parsed.operands == ("db", "migrate")
        assert parsed.unknown == ("--force", "up")

    def test_operand_before_option(self):
        parsed = split_argv(["db", "migrate", "up", "--force"])
        assert parsed.operands == ("db", "migrate", "up")
        assert parsed.unknown == ("--force",)

    def test_double_dash_makes_rest_operands(self):
        parsed = split_argv(["db", "migrate", "--", "--force"])
        assert parsed.operands == ("db", "migrate", "--force")
        assert parsed.unknown == ()

    def test_double_dash_after_unknown_is_kept(self):
        parsed = split_argv(["run", "-x", "--", "a"])
        assert parsed.operands == ("run",)
        assert parsed.unknown == ("-x", "--", "a")

    def test_root_flags_dropped_before_first_operand(self):
        parsed = split_argv(["--version", "db"])
        assert parsed.operands == ("db",)
        assert parsed.unknown == ()

    def test_root_flags_after_command_belong_to_command(self):
        """argparse hands tokens after the command to the command."""
        parsed = split_argv(["db", "migrate", "--help"])
        assert parsed.operands == ("db", "migrate")
        assert parsed.unknown == ("--help",)

    def test_single_dash_is_operand(self):
        parsed = split_argv(["cat", "-"])
        assert parsed.operands == ("cat", "-")


class TestResolveCommandArgs:
    """Tests for recovering a command's own arguments."""

    def test_path_segments_are_consumed(self):
        args = resolve_command_args(("db", "migrate"), ("db", "migrate"), ("--force", "up"))
        assert args == ("--force", "up")

    def test_operands_after_path_come_first(self):
        args = resolve_command_args(("db", "migrate"), ("db", "migrate", "up"), ("--dry-run",))
        assert args == ("up", "--dry-run")

    def test_operand_equal_to_path_segment_after_path(self):
        args = resolve_command_args(("repo", "add"), ("repo", "add", "repo", "add"), ())
        assert args == ("repo", "add")

    def test_stops_skipping_at_first_mismatch(self):
        """Known sharp edge: after a mismatch, later path segments are kept.

        "migrate" matches the second path segment, but skipping already
        stopped at "x", so it is treated as a command argument.
        """
        args = resolve_command_args(("db", "migrate"), ("db", "x", "migrate"), ())
        assert args == ("x", "migrate")

    def test_mismatch_at_first_segment_keeps_everything(self):
        args = resolve_command_args(("db", "migrate"), ("other", "db", "migrate"), ("-v",))
        assert args == ("other", "db", "migrate", "-v")

    def test_no_operands(self):
        assert resolve_command_args(("db",), (), ("--x",)) == ("--x",)


def _graph(make_command, *paths, deprecated=()):
    graph = CommandGraph()
    for path in paths:
        graph.add(make_command(*path, deprecated=path in deprecated))
    return graph


class TestBuildParser:
    """Tests for breadth-first parser construction."""

    def test_routes_to_nested_command(self, make_command):
        graph = _graph(make_command, ("db", "migrate"), ("db", "seed"), ("build",))
        parser = build_parser(graph, "tool", "1.0")

        namespace, extras = parser.parse_known_args(["db", "migrate", "--force", "up"])
        assert getattr(namespace, COMMAND_DEST).path == ("db", "migrate")
        assert extras == ["--force", "up"]

    def test_routes_to_top_level_command(self, make_command):
        graph = _graph(make_command, ("db", "migrate"), ("build",))
        parser = build_parser(graph, "tool", "1.0")

        namespace, _ = parser.parse_known_args(["build", "--watch"])
        assert getattr(namespace, COMMAND_DEST).path == ("build",)

    def test_unknown_command_raises(self, make_command):
        graph = _graph(make_command, ("db", "migrate"))
        parser = build_parser(graph, "tool", "1.0")

        with pytest.raises(InvalidCommandError):
            parser.parse_known_args(["db", "status"])

    def test_unknown_top_level_command_raises(self, make_command):
        graph = _graph(make_command, ("db", "migrate"))
        parser = build_parser(graph, "tool", "1.0")

        with pytest.raises(InvalidCommandError):
            parser.parse_known_args(["deploy"])

    def test_command_help_flag_passes_through(self, make_command):
        """Commands have no built-in help flag of their own."""
        graph = _graph(make_command, ("db", "migrate"))
        parser = build_parser(graph, "tool", "1.0")

        namespace, extras = parser.parse_known_args(["db", "migrate", "-h"])
        assert getattr(namespace, COMMAND_DEST).path == ("db", "migrate")
        assert extras == ["-h"]

    def test_deprecated_command_hidden_but_routable(self, make_command):
        graph = _graph(
            make_command, ("db", "migrate"), ("db", "upgrade"), deprecated=[("db", "upgrade")]
        )
        parser = build_parser(graph, "tool", "1.0")

        db_help = parser.parse_known_args(["db"])[0]._group_parser.format_help()
        assert "migrate" in db_help
        assert "upgrade" not in db_help

        namespace, _ = parser.parse_known_args(["db", "upgrade"])
        assert getattr(namespace, COMMAND_DEST).path == ("db", "upgrade")

    def test_top_level_help_lists_groups_and_commands(self, make_command):
        graph = _graph(make_command, ("db", "migrate"), ("build",))
        help_text = build_parser(graph, "tool", "1.0").format_help()

        assert "usage: tool" in help_text
        assert "db" in help_text
        assert "build command" in help_text

    def test_version_flag(self, make_command, capsys):
        parser = build_parser(_graph(make_command, ("build",)), "tool", "1.2.3")

        with pytest.raises(SystemExit) as exc_info:
            parser.parse_known_args(["--version"])
        assert exc_info.value.code == 0
        assert "tool 1.2.3" in capsys.readouterr().out

    def test_percent_in_description(self, make_command):
        """Descriptions are shown literally, even with a percent sign."""
        graph = CommandGraph()
        graph.add(make_command("build", description="Build 100% of targets"))
        graph.add(make_command("db", "vacuum", description="Reclaim 50% (%d) of space"))
        parser = build_parser(graph, "tool", "1.0")

        assert "Build 100% of targets" in parser.format_help()
        db_help = parser.parse_known_args(["db"])[0]._group_parser.format_help()
        assert "Reclaim 50% (%d) of space" in db_help
