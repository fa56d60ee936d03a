"""Tests for gitree_core.config: models and YAML loader."""

import os
from unittest.mock import patch

import pytest
import yaml
from pydantic import ValidationError

from gitree_core.config.loader import DEFAULT_CONFIG_TEMPLATE, _expand_env_vars, load_config
from gitree_core.config.models import GitreeConfig, SerializerConfig, StoreConfig


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch):
    monkeypatch.delenv("GITREE_CONFIG", raising=False)


# ── GitreeConfig defaults ───────────────────────────────────────────


class TestGitreeConfigDefaults:
    def test_default_log_level(self, sample_config):
        assert sample_config.log_level == "info"

    def test_default_log_format(self, sample_config):
        assert sample_config.log_format == "text"

    def test_default_store(self, sample_config):
        assert sample_config.store.backend == "memory"
        assert sample_config.store.path == ".gitree/objects"

    def test_default_concurrency(self, sample_config):
        assert sample_config.serializer.max_concurrency == 16


# ── Individual config model validations ─────────────────────────────


class TestStoreConfig:
    def test_invalid_backend_rejected(self):
        with pytest.raises(ValidationError):
            StoreConfig(backend="s3")

    def test_custom_values(self):
        cfg = StoreConfig(backend="disk", path="/var/lib/gitree")
        assert cfg.backend == "disk"
        assert cfg.path == "/var/lib/gitree"


class TestSerializerConfig:
    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_concurrency_rejected(self, value):
        with pytest.raises(ValidationError):
            SerializerConfig(max_concurrency=value)

    def test_sequential(self):
        assert SerializerConfig(max_concurrency=1).max_concurrency == 1


class TestGitreeConfig:
    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            GitreeConfig(log_level="verbose")

    def test_nested_dict(self):
        cfg = GitreeConfig(**{"store": {"backend": "disk"}, "serializer": {"max_concurrency": 4}})
        assert cfg.store.backend == "disk"
        assert cfg.serializer.max_concurrency == 4

    def test_template_is_valid(self):
        cfg = GitreeConfig(**yaml.safe_load(DEFAULT_CONFIG_TEMPLATE))
        assert cfg.store.backend == "disk"


# ── Env var expansion ───────────────────────────────────────────────


class TestExpandEnvVars:
    def test_expands_string_variable(self):
        with patch.dict(os.environ, {"GITREE_STORE": "/data/objects"}):
            assert _expand_env_vars("${GITREE_STORE}") == "/data/objects"

    def test_missing_var_becomes_empty(self):
        env = {k: v for k, v in os.environ.items() if k != "GITREE_NOPE"}
        with patch.dict(os.environ, env, clear=True):
            assert _expand_env_vars("${GITREE_NOPE}") == ""

    def test_expands_nested_structures(self):
        with patch.dict(os.environ, {"A": "alpha", "B": "beta"}):
            result = _expand_env_vars({"x": ["${A}", {"y": "${B}/objects"}]})
        assert result == {"x": ["alpha", {"y": "beta/objects"}]}

    def test_non_string_passthrough(self):
        assert _expand_env_vars(42) == 42
        assert _expand_env_vars(None) is None


# ── load_config ─────────────────────────────────────────────────────


class TestLoadConfig:
    def test_returns_defaults_when_no_file_exists(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        assert load_config() == GitreeConfig()

    def test_loads_valid_yaml(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "gitree.yaml").write_text("store:\n  backend: disk\nlog_level: debug\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")

        cfg = load_config()
        assert cfg.store.backend == "disk"
        assert cfg.log_level == "debug"

    def test_raises_on_invalid_yaml(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "gitree.yaml").write_text("store: [unclosed\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config()

    def test_raises_on_invalid_config_values(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "gitree.yaml").write_text("serializer:\n  max_concurrency: 0\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        with pytest.raises(ValueError, match="Invalid config"):
            load_config()

    def test_cli_path_takes_priority(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        (tmp_path / "gitree.yaml").write_text("log_level: warn\n")
        cli_file = tmp_path / "custom.yaml"
        cli_file.write_text("log_level: error\n")

        assert load_config(str(cli_file)).log_level == "error"

    def test_user_global_config_used_as_fallback(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        fake_home = tmp_path / "fakehome"
        (fake_home / ".gitree").mkdir(parents=True)
        (fake_home / ".gitree" / "config.yaml").write_text("log_format: json\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: fake_home)

        assert load_config().log_format == "json"

    def test_env_vars_expanded_in_loaded_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GITREE_OBJECTS", "/srv/objects")
        (tmp_path / "gitree.yaml").write_text('store:\n  path: "${GITREE_OBJECTS}"\n')
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")

        assert load_config().store.path == "/srv/objects"

    def test_empty_yaml_file_returns_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "gitree.yaml").write_text("")
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        assert load_config() == GitreeConfig()

    def test_env_var_config_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        (tmp_path / "gitree.yaml").write_text("log_level: warn\n")
        env_file = tmp_path / "from-env.yaml"
        env_file.write_text("log_level: debug\n")
        monkeypatch.setenv("GITREE_CONFIG", str(env_file))

        assert load_config().log_level == "debug"


# ── store path anchoring ────────────────────────────────────────────


class TestStorePathAnchoring:
    def test_relative_path_follows_user_config(self, tmp_path, monkeypatch):
        workdir = tmp_path / "work"
        workdir.mkdir()
        monkeypatch.chdir(workdir)
        fake_home = tmp_path / "fakehome"
        (fake_home / ".gitree").mkdir(parents=True)
        (fake_home / ".gitree" / "config.yaml").write_text("store:\n  path: objects\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: fake_home)

        cfg = load_config()
        assert cfg.store.path == str((fake_home / ".gitree").resolve() / "objects")

    def test_relative_path_follows_cli_config(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        conf_dir = tmp_path / "etc"
        conf_dir.mkdir()
        (conf_dir / "gitree.yaml").write_text("store:\n  backend: disk\n  path: data/objects\n")

        cfg = load_config(str(conf_dir / "gitree.yaml"))
        assert cfg.store.path == str(conf_dir.resolve() / "data" / "objects")
        assert cfg.store.backend == "disk"

    def test_absolute_path_unchanged(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
        target = tmp_path / "elsewhere" / "objects"
        (tmp_path / "gitree.yaml").write_text(f"store:\n  path: {target}\n")

        assert load_config().store.path == str(target)

    def test_default_path_not_anchored(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        fake_home = tmp_path / "fakehome"
        (fake_home / ".gitree").mkdir(parents=True)
        (fake_home / ".gitree" / "config.yaml").write_text("log_level: warn\n")
        monkeypatch.setattr("pathlib.Path.home", lambda: fake_home)

        assert load_config().store.path == ".gitree/objects"
