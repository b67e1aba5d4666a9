"""Tests for the command line entry point (report modes only, no event loop)."""

import pytest

from core.database import Database
from core.services.session_service import SessionService
from core.services.user_service import UserService
from main import main
from tests.conftest import FIXED_NOW


@pytest.fixture
def settings_file(tmp_path):
    db_path = tmp_path / "cli.db"
    ini = tmp_path / "settings.ini"
    ini.write_text(f"[database]\npath={db_path.as_posix()}\n")
    return str(ini), str(db_path)


def test_leaderboard_on_empty_database(settings_file, capsys):
    ini, _ = settings_file
    assert main(["--settings", ini, "--log-level", "WARNING", "--leaderboard", "3"]) == 0
    assert "No users yet." in capsys.readouterr().out


def test_leaderboard_lists_ranked_users(settings_file, capsys):
    ini, db_path = settings_file
    db = Database(db_path)
    UserService(db).add_user("alice", display_name="Alice")
    SessionService(db).create_session("alice", 1500, FIXED_NOW)
    db.close()

    assert main(["--settings", ini, "--log-level", "WARNING", "--leaderboard", "1"]) == 0
    out = capsys.readouterr().out
    assert "1. Alice" in out
    assert "25 min" in out


@pytest.mark.parametrize("limit", ["0", "-2"])
def test_leaderboard_rejects_non_positive_limit(settings_file, limit, capsys):
    ini, _ = settings_file
    with pytest.raises(SystemExit) as excinfo:
        main(["--settings", ini, "--leaderboard", limit])
    assert excinfo.value.code == 2
    assert "--leaderboard needs N >= 1" in capsys.readouterr().err


def test_stats_without_user(settings_file, capsys):
    ini, _ = settings_file
    assert main(["--settings", ini, "--log-level", "WARNING", "--stats"]) == 2
    assert "--stats needs --user" in capsys.readouterr().out
