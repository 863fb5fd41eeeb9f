import pytest

from resume_rag.app.container import build_container
from resume_rag.common.errors import ConfigurationError
from resume_rag.config import GlobalConfig
from resume_rag.generation.llm_interface import GeminiLLM, OpenAIChatLLM
from resume_rag.pipelines.resume_pipeline import ResumeQAPipeline
from resume_rag.retrieval.document_store import FileDocumentStore, InMemoryDocumentStore


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("GEMINI_API_KEY", "GEMINI_MODEL", "GROQ_API_KEY", "GROQ_MODEL", "RESUME_RAG_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_missing_primary_key_is_a_configuration_error(clean_env):
    container = build_container(GlobalConfig.load_default())

    with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
        container.primary_llm


def test_default_wiring_with_keys(clean_env):
    clean_env.setenv("GEMINI_API_KEY", "gemini-key")
    clean_env.setenv("GROQ_API_KEY", "groq-key")
    clean_env.setenv("GROQ_MODEL", "preferred-model")

    container = build_container(GlobalConfig.load_default())

    assert isinstance(container.primary_llm, GeminiLLM)
    assert container.primary_llm.model_name == "gemini-2.5-flash"
    assert isinstance(container.fallback_llm, OpenAIChatLLM)
    assert container.fallback_llm.models == [
        "preferred-model",
        "llama-3.1-8b-instant",
        "llama-3.3-70b-versatile",
    ]
    assert isinstance(container.document_store, FileDocumentStore)
    assert isinstance(container.pipeline, ResumeQAPipeline)
    assert container.orchestrator.cache is container.answer_cache
    assert container.pipeline is container.pipeline


def test_fallback_is_optional(clean_env):
    clean_env.setenv("GEMINI_API_KEY", "gemini-key")

    container = build_container(GlobalConfig.load_default())

    assert container.fallback_llm is None
    assert container.orchestrator.fallback is None


def test_configured_prompt_files_are_registered(tmp_path):
    (tmp_path / "extra.json").write_text(
        '{"name": "resume_strict", "user": "Q: {{ question }}"}', encoding="utf-8"
    )
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "prompts:\n  - extra.json\ndocument_store:\n  type: memory\n", encoding="utf-8"
    )

    container = build_container(GlobalConfig.load(config_path))

    with pytest.warns(UserWarning):
        builder = container.prompt_builder
    assert builder.build("resume_strict", question="Which roles?") == "Q: Which roles?"
    assert isinstance(container.document_store, InMemoryDocumentStore)
