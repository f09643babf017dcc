from pathlib import Path

import pytest

from sheetassist.config import GatewaySettings, load_settings


def test_defaults():
    s = load_settings(None)
    assert s.temperature == 0.7
    assert s.max_tokens == 500
    assert s.strict_responses is False


def test_load_nested_yaml(tmp_path):
    p = tmp_path / "settings.yml"
    p.write_text("gateway:\n  timeout_s: 5\n  claude_model: claude-test\n  credentials_path: keys.db\n", encoding="utf-8")
    s = load_settings(str(p))
    assert s.timeout_s == 5.0
    assert s.claude_model == "claude-test"
    assert Path(s.credentials_path) == tmp_path.resolve() / "keys.db"


def test_unknown_keys_rejected(tmp_path):
    p = tmp_path / "settings.yml"
    p.write_text("max_token: 10\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(str(p))


def test_non_mapping_rejected(tmp_path):
    p = tmp_path / "settings.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(str(p))


def test_timeout_must_be_positive():
    with pytest.raises(ValueError):
        GatewaySettings(timeout_s=0)
