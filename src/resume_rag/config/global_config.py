"""resume_rag.config.global_config

Global configuration loader and accessors.

This module wraps the raw YAML configuration dictionary and exposes cached,
validated access to each configuration section used by the pipeline.

Environment variables of the form ``${VAR}`` are expanded recursively in all
string values at load time. A value whose variable is not set keeps its
``${VAR}`` text; :func:`is_unset` treats such values, ``None`` and empty
strings as "not configured".

Classes
-------
GlobalConfig
    Loader and accessor for project configuration.

Functions
---------
is_unset
    Whether a configured value should be treated as missing.
resolve_setting
    Return a configured value or a default when it is unset.
"""

from __future__ import annotations

import os
from functools import cached_property
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG_PACKAGE = "resume_rag.config"
DEFAULT_CONFIG_RESOURCE = "default.yaml"
CONFIG_ENV_VAR = "RESUME_RAG_CONFIG"


def _expand_env(obj):
    """Recursively expand ``${VAR}`` references in strings of a nested structure."""
    if isinstance(obj, dict):
        return {k: _expand_env(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env(v) for v in obj]
    if isinstance(obj, str):
        return os.path.expandvars(obj)
    return obj


def is_unset(value: Any) -> bool:
    """Return ``True`` for ``None``, blank strings and unexpanded ``${VAR}`` strings."""
    if value is None:
        return True
    if isinstance(value, str):
        stripped = value.strip()
        return not stripped or (stripped.startswith("${") and stripped.endswith("}"))
    return False


def resolve_setting(value: Any, default: Any) -> Any:
    """Return ``value`` unless it is unset, otherwise ``default``."""
    return default if is_unset(value) else value


class GlobalConfig:
    """Loader and accessor for project configuration.

    Parameters
    ----------
    raw : dict
        Raw configuration data as loaded from YAML.
    config_path : Path or None, optional
        Absolute path of the loaded file, used to resolve relative paths.
    """

    def __init__(
            self,
            raw: dict,
            config_path: Path | None = None,
        ):
        if not isinstance(raw, dict):
            raise TypeError(f"Configuration root must be a mapping, got {type(raw)!r}")
        self.raw = raw
        self.config_path = config_path

    @classmethod
    def load(cls, path: str | Path) -> "GlobalConfig":
        """Load configuration from a YAML file.

        Parameters
        ----------
        path : str or Path
            Path to the YAML configuration file.

        Returns
        -------
        GlobalConfig
            Instance holding the environment-expanded data.
        """
        cfg_path = Path(path).expanduser().resolve()
        with cfg_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(_expand_env(data), config_path=cfg_path)

    @classmethod
    def load_default(cls) -> "GlobalConfig":
        """Load the configuration bundled with the package."""
        res = resources.files(DEFAULT_CONFIG_PACKAGE).joinpath(DEFAULT_CONFIG_RESOURCE)
        data = yaml.safe_load(res.read_text(encoding="utf-8")) or {}
        return cls(_expand_env(data))

    @classmethod
    def from_env(cls) -> "GlobalConfig":
        """Load the file named by ``RESUME_RAG_CONFIG``, or the bundled default."""
        path = os.environ.get(CONFIG_ENV_VAR)
        if path:
            return cls.load(path)
        return cls.load_default()

    def _section(self, name: str) -> dict:
        section = self.raw.get(name) or {}
        if not isinstance(section, dict):
            raise TypeError(f"'{name}' must be a mapping, got {type(section)!r}.")
        return section

    def resolve_path(self, value: str | Path) -> Path:
        """Resolve ``value`` relative to the config file directory when relative."""
        p = Path(value).expanduser()
        if p.is_absolute() or self.config_path is None:
            return p
        return (self.config_path.parent / p).resolve()

    @cached_property
    def chunk_size(self) -> int:
        """Return ``chunking.chunk_size`` (default ``500``).

        Raises
        ------
        ValueError
            If the value is not a positive integer.
        """
        value = int(self._section("chunking").get("chunk_size", 500))
        if value <= 0:
            raise ValueError("'chunking.chunk_size' must be a positive integer.")
        return value

    @cached_property
    def top_k(self) -> int:
        """Return ``retrieval.top_k`` (default ``3``)."""
        value = int(self._section("retrieval").get("top_k", 3))
        if value < 1:
            raise ValueError("'retrieval.top_k' must be at least 1.")
        return value

    @cached_property
    def cache_ttl_seconds(self) -> float:
        """Return ``cache.ttl_seconds`` (default one hour)."""
        value = float(self._section("cache").get("ttl_seconds", 3600))
        if value <= 0:
            raise ValueError("'cache.ttl_seconds' must be positive.")
        return value

    @cached_property
    def generation(self) -> dict:
        """Return the ``generation`` section (retry policy, deadline, mode parameters)."""
        return self._section("generation")

    @cached_property
    def primary_llm(self) -> dict:
        """Return the ``primary_llm`` section.

        Raises
        ------
        KeyError
            If the section is missing.
        """
        section = self.raw.get("primary_llm")
        if section is None:
            raise KeyError("Missing 'primary_llm' in configuration.")
        return section

    @cached_property
    def fallback_llm(self) -> dict | None:
        """Return the ``fallback_llm`` section, or ``None`` when not configured."""
        section = self.raw.get("fallback_llm")
        if not section:
            return None
        return section

    @cached_property
    def document_store(self) -> dict:
        """Return the ``document_store`` section with ``path`` resolved."""
        section = dict(self._section("document_store"))
        if not is_unset(section.get("path")):
            section["path"] = str(self.resolve_path(section["path"]))
        return section

    @cached_property
    def prompts(self) -> list[str]:
        """Return extra prompt sources (``pkg:``/``file:``/plain paths) to register."""
        prompts = self.raw.get("prompts")
        if prompts is None:
            return []
        if isinstance(prompts, str):
            return [prompts]
        if isinstance(prompts, (list, tuple)):
            return [str(p) for p in prompts]
        raise TypeError(f"'prompts' must be a str or list[str], got {type(prompts)!r}")

    @cached_property
    def logging_level(self) -> str:
        """Return ``logging.level`` (default ``"INFO"``)."""
        return str(self._section("logging").get("level", "INFO")).upper()
