"""YAML config loading: file discovery, env var expansion, store path anchoring."""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import GitreeConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GITREE_CONFIG"


def _candidate_paths(cli_path: str | None) -> list[Path]:
    paths = []
    if cli_path:
        paths.append(Path(cli_path))
    if os.environ.get(CONFIG_ENV_VAR):
        paths.append(Path(os.environ[CONFIG_ENV_VAR]))
    paths.append(Path("./gitree.yaml"))
    paths.append(Path.home() / ".gitree" / "config.yaml")
    return paths


def load_config(cli_path: str | None = None) -> GitreeConfig:
    """Load config with resolution order: CLI > $GITREE_CONFIG > project > user > defaults.

    A relative ``store.path`` set in a file is taken relative to that file's
    directory, so ``~/.gitree/config.yaml`` can point at ``objects`` and mean
    ``~/.gitree/objects`` whatever the working directory.
    """
    for path in _candidate_paths(cli_path):
        if not path.exists():
            continue
        try:
            with open(path) as f:
                raw = yaml.safe_load(f)
            if raw is None:
                continue
            config = GitreeConfig(**_expand_env_vars(raw))
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
        logger.debug("Loaded config from %s", path)
        return _anchor_store_path(config, path.parent)

    return GitreeConfig()


def _anchor_store_path(config: GitreeConfig, base: Path) -> GitreeConfig:
    # Only a path written in the file is anchored; the default stays cwd-relative.
    if "path" not in config.store.model_fields_set:
        return config
    store_path = Path(config.store.path).expanduser()
    if not store_path.is_absolute():
        store_path = base.resolve() / store_path
    store = config.store.model_copy(update={"path": str(store_path)})
    return config.model_copy(update={"store": store})


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `gitree config init`
DEFAULT_CONFIG_TEMPLATE = """\
# gitree.yaml

# Object store
store:
  backend: "disk"              # memory | disk
  path: ".gitree/objects"      # object directory for the disk backend

# Tree persistence
serializer:
  max_concurrency: 16          # concurrent store calls; 1 writes sequentially

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
