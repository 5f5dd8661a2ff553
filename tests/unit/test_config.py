"""
Tests for configuration loading.
"""

import json
from pathlib import Path

import pytest

from sealbid.core.config import EngineConfig, load_config


class TestLoadConfig:
    
    def test_defaults(self):
        cfg = load_config(environ={})
        assert cfg == EngineConfig()
        assert cfg.allow_reinit is False
    
    def test_env_overrides(self):
        cfg = load_config(environ={
            "SEALBID_BID_DURATION": "60",
            "SEALBID_REVEAL_DURATION": "30",
            "SEALBID_ALLOW_REINIT": "yes",
            "SEALBID_DB_PATH": "/tmp/x.db",
        })
        assert cfg.default_bid_duration == 60
        assert cfg.default_reveal_duration == 30
        assert cfg.allow_reinit is True
        assert cfg.db_path == Path("/tmp/x.db")
    
    def test_file_then_env(self, tmp_path):
        path = tmp_path / "sealbid.json"
        path.write_text(json.dumps({"default_bid_duration": 10, "log_to_file": True}))
        
        cfg = load_config(str(path), environ={"SEALBID_BID_DURATION": "20"})
        assert cfg.default_bid_duration == 20
        assert cfg.log_to_file is True
    
    def test_unknown_file_key(self, tmp_path):
        path = tmp_path / "sealbid.json"
        path.write_text(json.dumps({"colour": "blue"}))
        with pytest.raises(ValueError):
            load_config(str(path), environ={})
    
    def test_bad_integer(self):
        with pytest.raises(ValueError):
            load_config(environ={"SEALBID_BID_DURATION": "soon"})
    
    def test_bad_boolean(self):
        with pytest.raises(ValueError):
            load_config(environ={"SEALBID_ALLOW_REINIT": "maybe"})
    
    def test_dotenv_loaded(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("SEALBID_REVEAL_DURATION", raising=False)
        (tmp_path / ".env").write_text("SEALBID_REVEAL_DURATION=42\n")
        cfg = load_config()
        assert cfg.default_reveal_duration == 42
        monkeypatch.delenv("SEALBID_REVEAL_DURATION", raising=False)
