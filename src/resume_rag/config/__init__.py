"""resume_rag.config

Configuration subsystem for the resume question-answering pipeline.

This package provides structured access to configuration loaded from YAML
files, including the default configuration bundled with the package.

Modules
-------
global_config
    Global configuration loader and cached accessors.
"""
from .global_config import GlobalConfig, is_unset, resolve_setting

__all__ = ["GlobalConfig", "is_unset", "resolve_setting"]
