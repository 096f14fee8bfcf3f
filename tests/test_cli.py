"""
Tests for CLI interface.
"""

import io
import json

import pytest
from click.testing import CliRunner
from rich.console import Console

from sniview.application import EventChannel, EventStore, LiveEventsView
from sniview.cli import commands
from sniview.cli.commands import KeyReader, dispatch_keys, translate_key
from sniview.cli.main import cli
from sniview.config import load_config


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_args(tmp_path):
    """Point the CLI at a private config and state directory."""
    return ["--config", str(tmp_path / "config.ini")]


@pytest.fixture
def capture(tmp_path, sample_sni_lines, sample_noise_lines):
    path = tmp_path / "capture.log"
    path.write_text("\n".join(sample_noise_lines[:2] + sample_sni_lines) + "\n")
    return path


class TestCLI:
    """Tests for CLI commands."""

    def test_cli_version(self, runner):
        """Test --version flag."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_cli_help(self, runner):
        """Test --help flag."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("watch", "parse", "variants", "add-domain", "add-ip", "sets", "history"):
            assert command in result.output

    def test_watch_help(self, runner):
        result = runner.invoke(cli, ["watch", "--help"])
        assert result.exit_code == 0
        assert "--filter" in result.output
        assert "--no-persist" in result.output


class TestParseCommand:
    """Tests for parse command."""

    def test_parse_file(self, runner, capture):
        result = runner.invoke(cli, ["parse", "--output", "compact", str(capture)])
        assert result.exit_code == 0
        assert "assets.alicdn.com" in result.output
        assert "Queue 537" not in result.output

    def test_parse_json_filtered_sorted(self, runner, capture):
        result = runner.invoke(cli, [
            "parse", "--output", "json", "--filter", "target:true",
            "--sort", "timestamp", str(capture),
        ])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [item["domain"] for item in data] == ["www.youtube.com", "rr3.googlevideo.com"]

    def test_parse_stdin(self, runner, sample_sni_lines):
        result = runner.invoke(cli, ["parse", "-o", "json"], input="\n".join(sample_sni_lines))
        assert result.exit_code == 0
        assert len(json.loads(result.output)) == 4

    def test_parse_no_matches(self, runner, capture):
        result = runner.invoke(cli, ["parse", "--filter", "domain:nothing", str(capture)])
        assert result.exit_code == 0
        assert "No matching events" in result.output


class TestWatchCommand:
    """Tests for watch command."""

    def test_replay_file_persists_history(self, runner, config_args, capture):
        result = runner.invoke(cli, config_args + ["watch", str(capture)])
        assert result.exit_code == 0
        assert "4 events" in result.output

        result = runner.invoke(cli, config_args + ["history", "--output", "json"])
        assert result.exit_code == 0
        assert len(json.loads(result.output)) == 4

        result = runner.invoke(cli, config_args + ["history", "clear"])
        assert result.exit_code == 0
        result = runner.invoke(cli, config_args + ["history"])
        assert "No persisted events" in result.output

    def test_replay_without_persist(self, runner, config_args, capture):
        result = runner.invoke(cli, config_args + ["watch", "--no-persist", str(capture)])
        assert result.exit_code == 0
        result = runner.invoke(cli, config_args + ["history"])
        assert "No persisted events" in result.output

    def test_stdin_stream(self, runner, config_args, sample_sni_lines):
        result = runner.invoke(
            cli,
            config_args + ["watch", "--no-persist", "--refresh", "0.05", "-"],
            input="\n".join(sample_sni_lines) + "\n",
        )
        assert result.exit_code == 0
        assert "4 events" in result.output

    def test_missing_file(self, runner, config_args, tmp_path):
        result = runner.invoke(cli, config_args + ["watch", str(tmp_path / "missing.log")])
        assert result.exit_code == 1


class TestVariantsCommand:
    """Tests for variants command."""

    def test_domain(self, runner):
        result = runner.invoke(cli, ["variants", "a.b.example.com"])
        assert result.exit_code == 0
        assert "b.example.com" in result.output
        assert "Most specific" in result.output

    def test_ip(self, runner):
        result = runner.invoke(cli, ["variants", "203.0.113.7:443"])
        assert result.exit_code == 0
        assert "203.0.113.0/24" in result.output

    def test_no_candidates(self, runner):
        result = runner.invoke(cli, ["variants", "localhost"])
        assert result.exit_code == 0
        assert "No rule candidates" in result.output


class TestPromoteCommands:
    """Tests for add-domain / add-ip argument checks that need no backend."""

    def test_set_and_new_set_conflict(self, runner, config_args):
        result = runner.invoke(cli, config_args + [
            "add-domain", "example.com", "--set", "x", "--new-set", "y",
        ])
        assert result.exit_code == 2

    def test_backend_unreachable(self, runner, config_args):
        result = runner.invoke(cli, config_args + [
            "--base-url", "http://127.0.0.1:9", "add-ip", "203.0.113.7:443",
        ])
        assert result.exit_code == 1
        assert "Failed to add ip" in result.output


class KeyedLineSource:
    """Yields lines, pressing keys on a view before chosen positions."""

    def __init__(self, lines, presses, view):
        self.lines = list(lines)
        self.presses = presses
        self.view = view
        self.notifications = []

    def read_lines(self):
        for index, line in enumerate(self.lines):
            if index in self.presses:
                notifications, _ = dispatch_keys(self.view, self.presses[index])
                self.notifications.extend(notifications)
            yield line

    def close(self):
        pass

    def metadata(self):
        return {"source_type": "memory", "path": "<memory>", "name": "memory"}


def scripted_getchar(*chars):
    """getchar stand-in returning ``chars`` in order."""
    pending = iter(chars)
    return lambda: next(pending)


class TestWatchKeys:
    """Tests for the watch hotkeys."""

    def test_translate_key(self):
        assert translate_key("\x18") == ("x", True)
        assert translate_key("\x1b[3~") == ("Delete", False)
        assert translate_key("p") == ("p", False)

    def test_pause_during_stream(self, sample_sni_lines):
        """Test lines arriving between two p presses are dropped."""
        store = EventStore()
        view = LiveEventsView(store)
        source = KeyedLineSource(sample_sni_lines, {1: ["p"], 3: ["p"]}, view)
        channel = EventChannel(source, is_paused=store.is_paused)

        channel.run_inline()
        store.pump(channel.events)

        assert store.snapshot() == [sample_sni_lines[0], sample_sni_lines[3]]
        assert channel.dropped == 2
        assert [n.message for n in source.notifications] == ["Domains paused", "Domains resumed"]

    def test_clear_and_quit(self):
        store = EventStore()
        store.extend(["a", "b"])
        view = LiveEventsView(store)

        notifications, quit_requested = dispatch_keys(view, ["\x18", "z", "q", "p"])
        assert [n.message for n in notifications] == ["Cleared all domains"]
        assert quit_requested
        assert store.snapshot() == []
        assert not store.is_paused()

    def test_key_reader_stops_after_quit(self):
        reader = KeyReader(getchar=scripted_getchar("p", "\x18", "q", "never read"))
        reader.start()
        reader.join(timeout=5)

        assert not reader.running
        assert reader.drain() == ["p", "\x18", "q"]

    def test_key_reader_treats_interrupt_as_quit(self):
        def getchar():
            raise KeyboardInterrupt

        reader = KeyReader(getchar=getchar)
        reader.start()
        reader.join(timeout=5)
        assert reader.drain() == ["\x03"]

    def test_watch_routes_keys(self, monkeypatch, tmp_path, line_source, sample_sni_lines):
        """Test watch applies key presses and stops on q."""
        monkeypatch.setattr(
            commands, "create_source", lambda location, config: line_source(sample_sni_lines),
        )
        output = io.StringIO()
        console = Console(file=output, width=200)

        exit_code = commands.watch_command(
            config=load_config(tmp_path / "config.ini", env={}),
            location="http://appliance.test/api/logs/stream",
            filter_text="",
            sort=None,
            descending=False,
            limit=None,
            persist=False,
            refresh=0.05,
            console=console,
            error_console=console,
            key_reader=KeyReader(getchar=scripted_getchar("p", "\x18", "q")),
        )

        assert exit_code == 0
        assert "Domains paused" in output.getvalue()
        assert "Cleared all domains" in output.getvalue()
