"""
Tests for how `python app.py` binds the development server.
"""

import importlib

import pytest

import config
from app import run_options


@pytest.fixture
def fresh_config(monkeypatch):
    """Reload config with HOST/FLASK_DEBUG unset, restoring it afterwards."""
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("FLASK_DEBUG", raising=False)
    monkeypatch.setattr("dotenv.load_dotenv", lambda *args, **kwargs: False)
    yield importlib.reload(config)
    monkeypatch.undo()
    importlib.reload(config)


class TestRunOptions:

    def test_defaults_bind_loopback_with_debugger(self, fresh_config):
        options = run_options(vars(fresh_config.Config))

        assert fresh_config.Config.HOST == "127.0.0.1"
        assert options["host"] == "127.0.0.1"
        assert options["debug"] is True
        assert options["port"] == 3000

    def test_debug_forced_off_on_all_interfaces(self):
        options = run_options({"HOST": "0.0.0.0", "DEBUG": True, "PORT": 3000})

        assert options == {"host": "0.0.0.0", "port": 3000, "debug": False, "threaded": True}

    @pytest.mark.parametrize("host", ["127.0.0.1", "localhost", "::1"])
    def test_debug_kept_on_loopback(self, host):
        assert run_options({"HOST": host, "DEBUG": True})["debug"] is True

    def test_missing_host_falls_back_to_loopback(self):
        options = run_options({"DEBUG": False, "PORT": 8080})

        assert options["host"] == "127.0.0.1"
        assert options["port"] == 8080
        assert options["debug"] is False
