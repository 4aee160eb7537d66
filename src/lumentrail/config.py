"""LumenTrail configuration loader.

Priority (high → low):
  1. CLI flags              (handled at call site — not in this module)
  2. Environment variables  (LUMENTRAIL_DB_PATH)
  3. Per-project lumentrail.yaml
  4. Global ~/.lumentrail/config.yaml
  5. Hardcoded defaults

All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from lumentrail.ingest.chunker import DEFAULT_MAX_LENGTH, DEFAULT_OVERLAP
from lumentrail.ingest.scan import DEFAULT_IGNORED
from lumentrail.search.engine import DEFAULT_LIMIT

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".lumentrail"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
PROJECT_CONFIG_NAME: str = "lumentrail.yaml"
DEFAULT_DB_PATH: str = "data/lumentrail.db"
DB_PATH_ENV: str = "LUMENTRAIL_DB_PATH"

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["store", "chunker", "search", "watch"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class StoreCfg:
    """Database location (lumentrail.yaml: store:)."""

    path: str = DEFAULT_DB_PATH


@dataclass
class ChunkerCfg:
    """Chunk window and overlap in characters (lumentrail.yaml: chunker:)."""

    max_length: int = DEFAULT_MAX_LENGTH
    overlap: int = DEFAULT_OVERLAP


@dataclass
class SearchCfg:
    """Search defaults (lumentrail.yaml: search:)."""

    limit: int = DEFAULT_LIMIT


@dataclass
class WatchCfg:
    """Directory watcher settings (lumentrail.yaml: watch:).

    Attributes:
        interval: Seconds between polls.
        ignore: Glob patterns matched against file and directory names.
    """

    interval: float = 1.0
    ignore: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORED))


@dataclass
class LumenTrailConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    store: StoreCfg = field(default_factory=StoreCfg)
    chunker: ChunkerCfg = field(default_factory=ChunkerCfg)
    search: SearchCfg = field(default_factory=SearchCfg)
    watch: WatchCfg = field(default_factory=WatchCfg)

    @property
    def db_path(self) -> Path:
        return Path(self.store.path)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _validate(cfg: LumenTrailConfig) -> None:
    if cfg.chunker.max_length < 1:
        raise ConfigError(f"chunker.max_length must be >= 1, got {cfg.chunker.max_length}")
    if cfg.chunker.overlap < 0:
        raise ConfigError(f"chunker.overlap must be >= 0, got {cfg.chunker.overlap}")
    if cfg.search.limit < 1:
        raise ConfigError(f"search.limit must be >= 1, got {cfg.search.limit}")
    if cfg.watch.interval <= 0:
        raise ConfigError(f"watch.interval must be > 0, got {cfg.watch.interval}")
    if not cfg.store.path:
        raise ConfigError("store.path must not be empty")


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse '{path}': {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"'{path}' must contain a mapping, got {type(raw).__name__}")
    return raw


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    raw = data.get(name) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config section '{name}' must be a mapping, got {type(raw).__name__}")
    return raw


def _cfg_from_dict(data: dict[str, Any]) -> LumenTrailConfig:
    """Build a *LumenTrailConfig* from a merged raw YAML dict."""
    cfg = LumenTrailConfig()

    try:
        if "store" in data:
            s = _section(data, "store")
            cfg.store = StoreCfg(path=str(s.get("path", cfg.store.path)))

        if "chunker" in data:
            c = _section(data, "chunker")
            cfg.chunker = ChunkerCfg(
                max_length=int(c.get("max_length", cfg.chunker.max_length)),
                overlap=int(c.get("overlap", cfg.chunker.overlap)),
            )

        if "search" in data:
            q = _section(data, "search")
            cfg.search = SearchCfg(limit=int(q.get("limit", cfg.search.limit)))

        if "watch" in data:
            w = _section(data, "watch")
            ignore = w.get("ignore", cfg.watch.ignore)
            if not isinstance(ignore, list):
                raise ConfigError(
                    f"watch.ignore must be a list of glob patterns, got {type(ignore).__name__}"
                )
            cfg.watch = WatchCfg(
                interval=float(w.get("interval", cfg.watch.interval)),
                ignore=[str(p) for p in ignore],
            )
    except ConfigError:
        raise
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid config value: {exc}") from exc

    return cfg


def _apply_env_overrides(cfg: LumenTrailConfig) -> LumenTrailConfig:
    """Apply LUMENTRAIL_* environment variable overrides."""
    if path := os.environ.get(DB_PATH_ENV):
        cfg.store.path = path
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> LumenTrailConfig:
    """Load and return a merged *LumenTrailConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *lumentrail.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If a value has the wrong type or is out of range.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    # Layer 1: global config
    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    # Layer 2: per-project config
    project_cfg_path = search_dir / PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)

    # Layer 3: env var overrides
    cfg = _apply_env_overrides(cfg)

    _validate(cfg)
    return cfg


def ensure_global_config(
    global_config_path: Path | None = None,
) -> Path:
    """Create ``~/.lumentrail/config.yaml`` with defaults if it does not exist.

    Creates parent directory with mode 0o700 and the config file with
    mode 0o600 (owner-readable only).

    Args:
        global_config_path: Override path (for testing).

    Returns:
        Path to the global config file.
    """
    target = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    if not target.exists():
        content = (
            "# LumenTrail global configuration — defaults for every project.\n"
            "\n"
            "chunker:\n"
            f"  max_length: {DEFAULT_MAX_LENGTH}\n"
            f"  overlap: {DEFAULT_OVERLAP}\n"
            "\n"
            "search:\n"
            f"  limit: {DEFAULT_LIMIT}\n"
        )
        target.write_text(content, encoding="utf-8")
        target.chmod(0o600)

    return target
