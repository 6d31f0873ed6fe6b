# tests/test_config.py
import pytest
from config import WizardConfig, load_config
from provisioning.errors import ConfigError

def test_defaults_when_default_file_missing(monkeypatch, tmp_path):
    monkeypatch.setattr("config.CONFIG_PATH", tmp_path / "absent.yaml")
    assert load_config(environ={}) == WizardConfig()

def test_file_values(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("catalog_path: /srv/catalog.yaml\nresource_cache_ttl: 30\nmax_submit_attempts: 5\n")
    config = load_config(str(path), environ={})
    assert config.catalog_path == "/srv/catalog.yaml"
    assert config.resource_cache_ttl == 30.0
    assert config.max_submit_attempts == 5

def test_env_overrides_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("spool_dir: /srv/spool\n")
    config = load_config(str(path), environ={
        "PROVISION_WIZARD_SPOOL": "/tmp/spool",
        "PROVISION_WIZARD_MAX_ATTEMPTS": "1",
    })
    assert config.spool_dir == "/tmp/spool"
    assert config.max_submit_attempts == 1

def test_explicit_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "absent.yaml"), environ={})

def test_unknown_keys(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("catalog: /srv/catalog.yaml\n")
    with pytest.raises(ConfigError) as exc:
        load_config(str(path), environ={})
    assert "catalog" in exc.value.message
    assert "catalog_path" in exc.value.suggestion

@pytest.mark.parametrize("env", [
    {"PROVISION_WIZARD_CACHE_TTL": "soon"},
    {"PROVISION_WIZARD_MAX_ATTEMPTS": "-1"},
])
def test_bad_values(tmp_path, env):
    path = tmp_path / "config.yaml"
    path.write_text("{}\n")
    with pytest.raises(ConfigError):
        load_config(str(path), environ=env)

def test_non_mapping_document(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_config(str(path), environ={})

def test_max_submit_attempts_must_allow_one_try(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("max_submit_attempts: 0\n")
    with pytest.raises(ConfigError, match="at least 1"):
        load_config(str(path), environ={})
    with pytest.raises(ConfigError):
        load_config(str(path), environ={"PROVISION_WIZARD_MAX_ATTEMPTS": "0"})
    assert load_config(str(path), environ={"PROVISION_WIZARD_MAX_ATTEMPTS": "1"}).max_submit_attempts == 1
