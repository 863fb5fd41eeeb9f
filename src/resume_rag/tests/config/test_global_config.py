from pathlib import Path

import pytest

from resume_rag.config import GlobalConfig, is_unset, resolve_setting


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "value, expected",
    [(None, True), ("", True), ("  ", True), ("${GEMINI_API_KEY}", True), ("key", False), (0, False)],
)
def test_is_unset(value, expected):
    assert is_unset(value) is expected


def test_resolve_setting_prefers_configured_value():
    assert resolve_setting("gemini-pro", "default") == "gemini-pro"
    assert resolve_setting("${GEMINI_MODEL}", "default") == "default"


def test_environment_variables_are_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv("TEST_GEMINI_KEY", "secret")
    monkeypatch.delenv("TEST_UNSET_VAR", raising=False)
    cfg = GlobalConfig.load(_write(
        tmp_path,
        "primary_llm:\n"
        "  type: gemini\n"
        "  api_key: ${TEST_GEMINI_KEY}\n"
        "  model_name: ${TEST_UNSET_VAR}\n",
    ))

    assert cfg.primary_llm["api_key"] == "secret"
    assert is_unset(cfg.primary_llm["model_name"])


def test_packaged_defaults():
    cfg = GlobalConfig.load_default()

    assert cfg.chunk_size == 500
    assert cfg.top_k == 3
    assert cfg.cache_ttl_seconds == 3600.0
    assert cfg.generation["max_retries"] == 1
    assert cfg.generation["deadline_seconds"] == 60
    assert cfg.primary_llm["type"] == "gemini"
    assert cfg.fallback_llm["type"] == "groq"
    assert cfg.document_store["type"] == "file"
    assert cfg.logging_level == "INFO"
    assert cfg.prompts == []


def test_missing_sections_use_defaults(tmp_path):
    cfg = GlobalConfig.load(_write(tmp_path, "logging:\n  level: debug\n"))

    assert cfg.chunk_size == 500
    assert cfg.top_k == 3
    assert cfg.fallback_llm is None
    assert cfg.document_store == {}
    assert cfg.logging_level == "DEBUG"
    with pytest.raises(KeyError):
        cfg.primary_llm


def test_document_store_path_resolves_against_config_dir(tmp_path):
    cfg = GlobalConfig.load(_write(tmp_path, "document_store:\n  type: file\n  path: data/resume.json\n"))

    assert cfg.document_store["path"] == str((tmp_path / "data" / "resume.json").resolve())


@pytest.mark.parametrize(
    "text, attribute",
    [
        ("chunking:\n  chunk_size: 0\n", "chunk_size"),
        ("retrieval:\n  top_k: 0\n", "top_k"),
        ("cache:\n  ttl_seconds: -5\n", "cache_ttl_seconds"),
    ],
)
def test_invalid_numbers_are_rejected(tmp_path, text, attribute):
    cfg = GlobalConfig.load(_write(tmp_path, text))

    with pytest.raises(ValueError):
        getattr(cfg, attribute)


def test_sections_must_be_mappings(tmp_path):
    cfg = GlobalConfig.load(_write(tmp_path, "chunking: 500\n"))

    with pytest.raises(TypeError):
        cfg.chunk_size


def test_prompts_accepts_string_or_list(tmp_path):
    single = GlobalConfig({"prompts": "file:extra.json"})
    many = GlobalConfig({"prompts": ["a.json", "pkg:resume_rag.prompts:default.json"]})

    assert single.prompts == ["file:extra.json"]
    assert many.prompts == ["a.json", "pkg:resume_rag.prompts:default.json"]


def test_from_env_uses_config_variable(tmp_path, monkeypatch):
    path = _write(tmp_path, "retrieval:\n  top_k: 5\n")
    monkeypatch.setenv("RESUME_RAG_CONFIG", str(path))

    assert GlobalConfig.from_env().top_k == 5

    monkeypatch.delenv("RESUME_RAG_CONFIG")
    assert GlobalConfig.from_env().top_k == 3


def test_root_must_be_mapping():
    with pytest.raises(TypeError):
        GlobalConfig(["not", "a", "mapping"])
