from pathlib import Path
import pytest
from pydantic import ValidationError

from purifier.config_model.model import ENV_VAR, PurifierCfg, load_config

def test_config_loads(cfg, cfg_path):
    # sanity top-level
    assert cfg.sanitizer.strict is True
    assert cfg.sanitizer.default_type == "string"
    assert cfg.sanitizer.unknown_key_filter == "escape"
    assert cfg.validator.messages == {}
    assert cfg.logging.level == "WARNING"
    assert cfg.source == cfg_path.resolve()

def test_env_var_wins_over_default_location(tmp_path, monkeypatch):
    p = tmp_path / "alt.toml"
    p.write_text('[sanitizer]\nstrict = false\ndefault_type = "Int"\n', encoding="utf-8")
    monkeypatch.setenv(ENV_VAR, str(p))
    cfg = load_config()
    assert cfg.sanitizer.strict is False
    assert cfg.sanitizer.default_type == "int"
    assert cfg.source == p.resolve()

def test_defaults_when_nothing_is_found(tmp_path, monkeypatch):
    monkeypatch.delenv(ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    cfg = load_config()
    assert cfg.source is None
    assert cfg.sanitizer.strict is True
    assert cfg.validator.default_type == "string"

def test_unknown_default_type_is_rejected(tmp_path):
    p = tmp_path / "bad.toml"
    p.write_text('[validator]\ndefault_type = "uuid"\n', encoding="utf-8")
    with pytest.raises(ValidationError):
        PurifierCfg.from_toml(p)

def test_bom_prefixed_file_is_accepted(tmp_path):
    p = tmp_path / "bom.toml"
    p.write_bytes("\ufeff[logging]\nlevel = \"DEBUG\"\n".encode("utf-8"))
    assert PurifierCfg.from_toml(p).logging.level == "DEBUG"

def test_broken_toml_raises_runtime_error(tmp_path):
    p = tmp_path / "broken.toml"
    p.write_text("[sanitizer\nstrict = ", encoding="utf-8")
    with pytest.raises(RuntimeError):
        PurifierCfg.from_toml(p)

def test_message_overrides(tmp_path):
    p = tmp_path / "msgs.toml"
    p.write_text('[validator.messages]\nfield_required = "Needed"\n', encoding="utf-8")
    cfg = load_config(Path(p))
    assert cfg.validator.messages == {"field_required": "Needed"}
    assert cfg.sanitizer.strict is True
