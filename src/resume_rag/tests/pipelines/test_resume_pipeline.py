import pytest

from resume_rag.common.errors import InvalidInput, NotFound, RateLimited
from resume_rag.common.schemas import AnswerMode, Document
from resume_rag.generation.answer_cache import AnswerCache
from resume_rag.generation.llm_interface import BackendHTTPError
from resume_rag.generation.orchestrator import GenerationOrchestrator
from resume_rag.pipelines.resume_pipeline import (
    GREETING_ANSWER,
    NO_RELEVANT_INFO_ANSWER,
    ResumeQAPipeline,
    is_greeting,
)
from resume_rag.retrieval.document_store import InMemoryDocumentStore
from resume_rag.retrieval.retriever import LexicalRetriever
from resume_rag.retrieval.text_splitter import split_into_chunks

RESUME = "Skilled in Go and Rust. Built three scheduler engines. Graduated 2023."


class RecordingLLM:
    """Backend stub that records prompts and returns fixed outcomes."""

    model_name = "stub-model"

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes) or ["You know Go and Rust."]
        self.prompts = []

    def generate(self, prompt, **kwargs):
        self.prompts.append(prompt)
        outcome = self.outcomes[0] if len(self.outcomes) == 1 else self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _pipeline(primary=None, document=None, store=None):
    store = store if store is not None else InMemoryDocumentStore(document)
    orchestrator = GenerationOrchestrator(
        primary=primary or RecordingLLM(),
        cache=AnswerCache(),
        sleep=lambda _: None,
    )
    return ResumeQAPipeline(
        document_store=store,
        retriever=LexicalRetriever(top_k=3),
        orchestrator=orchestrator,
        chunk_size=30,
    )


def _resume_document():
    return Document(text=RESUME, chunks=split_into_chunks(RESUME, chunk_size=30))


def test_end_to_end_answer_is_generated_and_cached():
    primary = RecordingLLM("You know Go and Rust.")
    pipeline = _pipeline(primary, _resume_document())

    result = pipeline.run("What languages do I know?")

    assert result.answer == "You know Go and Rust."
    assert result.relevant_chunks == 3
    assert result.mode is AnswerMode.RECOMMEND
    assert result.cached is False
    assert result.backend == "primary"
    assert pipeline.cache.get("what languages do i know?:recommend") == "You know Go and Rust."

    prompt = primary.prompts[0]
    assert "--- Resume ---\nSkilled in Go and Rust.\n\nBuilt three scheduler engines.\n\nGraduated 2023." in prompt
    assert "--- Question ---\nWhat languages do I know?" in prompt


def test_repeated_question_is_served_from_cache():
    primary = RecordingLLM("You know Go and Rust.")
    pipeline = _pipeline(primary, _resume_document())
    pipeline.run("What languages do I know?")

    again = pipeline.run("  what LANGUAGES do i know?  ")

    assert again.cached is True
    assert again.answer == "You know Go and Rust."
    assert again.relevant_chunks == 3
    assert len(primary.prompts) == 1


def test_modes_do_not_share_cache_entries():
    primary = RecordingLLM("Recommend answer text.", "Strict answer text.")
    pipeline = _pipeline(primary, _resume_document())

    recommend = pipeline.run("What languages do I know?", "recommend")
    strict = pipeline.run("What languages do I know?", "strict")

    assert recommend.answer == "Recommend answer text."
    assert strict.answer == "Strict answer text."
    assert strict.mode is AnswerMode.STRICT
    assert "You are a precise resume assistant." in primary.prompts[1]


def test_most_relevant_chunk_is_first_in_prompt():
    primary = RecordingLLM()
    pipeline = _pipeline(primary, _resume_document())

    pipeline.run("Which scheduler engines did I build?")

    extract = primary.prompts[0].split("--- Resume ---\n", 1)[1]
    assert extract.startswith("Built three scheduler engines.")


@pytest.mark.parametrize("question", ["hello", "HELLO!", "  Hi there ", "good morning"])
def test_greetings_skip_retrieval_and_generation(question):
    primary = RecordingLLM()
    pipeline = _pipeline(primary, document=None)

    result = pipeline.run(question)

    assert result.answer == GREETING_ANSWER
    assert result.relevant_chunks == 0
    assert primary.prompts == []


def test_is_greeting_needs_the_whole_question():
    assert is_greeting("Hey!")
    assert not is_greeting("Hello, what languages do I know?")


@pytest.mark.parametrize("question", [None, "", "   ", 42])
def test_invalid_questions_are_rejected(question):
    with pytest.raises(InvalidInput, match="Please provide a valid question"):
        _pipeline(document=_resume_document()).run(question)


def test_unknown_mode_is_rejected():
    with pytest.raises(InvalidInput):
        _pipeline(document=_resume_document()).run("What languages do I know?", "creative")


def test_missing_resume_is_not_found():
    with pytest.raises(NotFound, match="No resume found"):
        _pipeline(document=None).run("What languages do I know?")


def test_document_without_chunks_is_split_on_the_fly():
    primary = RecordingLLM()
    pipeline = _pipeline(primary, Document(text=RESUME, chunks=[]))

    result = pipeline.run("What languages do I know?")

    assert result.relevant_chunks == 3


def test_document_without_text_has_no_relevant_info():
    primary = RecordingLLM()
    pipeline = _pipeline(primary, Document(text="   ", chunks=[]))

    result = pipeline.run("What languages do I know?")

    assert result.answer == NO_RELEVANT_INFO_ANSWER
    assert result.relevant_chunks == 0
    assert primary.prompts == []


def test_generation_errors_propagate_and_are_not_cached():
    rate_limited = BackendHTTPError("quota", status_code=429, retry_after=12.0)
    pipeline = _pipeline(RecordingLLM(rate_limited), _resume_document())

    with pytest.raises(RateLimited) as exc_info:
        pipeline.run("What languages do I know?")

    assert exc_info.value.retry_after == 12.0
    assert len(pipeline.cache) == 0


def test_pipeline_is_callable():
    pipeline = _pipeline(document=_resume_document())
    assert pipeline("What languages do I know?").answer == "You know Go and Rust."
