"""Smoke tests for the command-line demo."""

import pytest

from sprintpulse.cli import create_sample_entries, create_sample_members, main
from sprintpulse.config.settings import get_settings
from sprintpulse.domain.errors import InvalidWorkWeekError


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Run the CLI without environment overrides."""
    monkeypatch.delenv("SPRINTPULSE_FIRST_SPRINT_START", raising=False)
    monkeypatch.delenv("SPRINTPULSE_WORKING_DAYS", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSmoke:
    """End-to-end smoke tests for the CLI."""

    def test_sample_members(self):
        """The first sample member is the manager."""
        members = create_sample_members(3)
        assert [m.id for m in members] == ["M001", "M002", "M003"]
        assert [m.is_manager for m in members] == [True, False, False]

    def test_sample_entries_fill_ratio(self):
        """Sample entries cover the requested share of cells."""
        members = create_sample_members(2)
        entries = create_sample_entries(members, ["d1", "d2", "d3", "d4", "d5"], fill_ratio=0.5)
        assert len(entries) == 5

    def test_capacity(self, capsys):
        """Capacity command prints the sprint figures."""
        code = main(["capacity", "--start", "2024-01-07", "--end", "2024-01-18", "--team-size", "4"])
        out = capsys.readouterr().out
        assert code == 0
        assert "Working days: 10" in out
        assert "Potential hours: 280" in out
        assert "Health:" in out

    def test_capacity_inverted_range(self, capsys):
        """An inverted range is refused."""
        code = main(["capacity", "--start", "2024-01-18", "--end", "2024-01-07"])
        assert code == 1
        assert "after end" in capsys.readouterr().err

    def test_detect(self, capsys):
        """Detect prints the sprint for a date."""
        code = main(["detect", "--date", "2024-01-22", "--first-start", "2024-01-07"])
        out = capsys.readouterr().out
        assert code == 0
        assert "Sprint 2 (current)" in out
        assert "2024-01-21 .. 2024-02-01" in out

    def test_detect_needs_first_start(self, capsys):
        """Without a first sprint start, detect fails cleanly."""
        assert main(["detect", "--date", "2024-01-22"]) == 1

    def test_recognition(self, capsys):
        """Recognition prints a ranked leaderboard."""
        code = main(["recognition", "--users", "3", "--weeks", "4"])
        out = capsys.readouterr().out
        assert code == 0
        assert "Leaderboard (all-time)" in out
        assert "#1" in out and "#3" in out

    def test_no_command(self, capsys):
        """Without a command, help is printed."""
        assert main([]) == 1

    def test_invalid_settings(self, monkeypatch, capsys):
        """Invalid environment settings print an error instead of raising."""
        monkeypatch.setenv("SPRINTPULSE_WORKING_DAYS", "")
        get_settings.cache_clear()
        code = main(["detect", "--date", "2024-01-22", "--first-start", "2024-01-07"])
        assert code == 1
        assert "Error: invalid settings" in capsys.readouterr().err

    def test_engine_error_is_reported(self, monkeypatch, capsys):
        """Engine errors raised by a command become an error line and exit code 1."""

        def fail(*args, **kwargs):
            raise InvalidWorkWeekError("work week has no working days")

        monkeypatch.setattr("sprintpulse.cli.run_detect", fail)
        code = main(["detect", "--date", "2024-01-22", "--first-start", "2024-01-07"])
        assert code == 1
        assert "Error: work week has no working days" in capsys.readouterr().err
