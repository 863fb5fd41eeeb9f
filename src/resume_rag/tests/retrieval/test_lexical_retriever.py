import math

import pytest

from resume_rag.common.tokenisation import tokenize
from resume_rag.retrieval.retriever import LexicalRetriever, rank
from resume_rag.retrieval.vectorizer import build_vocabulary, cosine_similarity, vectorize


CHUNKS = [
    "I know Python.",
    "I like cooking on weekends.",
    "Python and Go services.",
]


def test_tokenize_lowercases_and_splits_on_non_word_characters():
    assert tokenize("Go, Rust & C++!  Python3") == ["go", "rust", "c", "python3"]
    assert tokenize("") == []


def test_vocabulary_is_in_first_appearance_order():
    assert build_vocabulary(["Go and Rust", "rust, python"]) == ["go", "and", "rust", "python"]


def test_vectorize_counts_terms_over_vocabulary():
    vocabulary = ["go", "rust", "python"]
    assert vectorize("Go go GO rust", vocabulary) == [3, 1, 0]


def test_cosine_similarity_bounds_and_guards():
    assert cosine_similarity([1, 2, 3], [1, 2, 3]) == pytest.approx(1.0)
    assert cosine_similarity([1, 0], [0, 1]) == 0.0
    assert cosine_similarity([0, 0], [1, 1]) == 0.0
    assert cosine_similarity([1, 1], [1, 1, 1]) == 0.0


def test_scores_are_cosine_of_term_frequency_vectors():
    scored = LexicalRetriever().score("python", CHUNKS)

    assert [s.position for s in scored] == [0, 1, 2]
    assert scored[0].score == pytest.approx(1 / math.sqrt(3))
    assert scored[1].score == 0.0
    assert scored[2].score == pytest.approx(1 / math.sqrt(4))


def test_retrieve_orders_by_descending_score():
    ranked = LexicalRetriever(top_k=2).retrieve("python", CHUNKS)

    assert [r.text for r in ranked] == ["I know Python.", "Python and Go services."]


def test_ties_keep_input_order():
    chunks = ["rust go", "go rust", "java", "rust go"]

    ranked = LexicalRetriever(top_k=4).retrieve("go rust", chunks)

    assert [r.position for r in ranked] == [0, 1, 3, 2]


def test_no_overlap_returns_first_chunks_in_document_order():
    ranked = rank("What is my favourite colour?", CHUNKS, top_k=2)

    assert ranked == CHUNKS[:2]


def test_empty_chunk_list_returns_nothing():
    assert LexicalRetriever().retrieve("python", []) == []


def test_top_k_caps_results_and_override_per_call():
    retriever = LexicalRetriever(top_k=1)

    assert len(retriever.retrieve("python", CHUNKS)) == 1
    assert len(retriever.retrieve("python", CHUNKS, top_k=10)) == len(CHUNKS)


@pytest.mark.parametrize("top_k", [0, -1, "many"])
def test_invalid_top_k_is_rejected(top_k):
    with pytest.raises(ValueError):
        LexicalRetriever(top_k=top_k)


def test_ranking_is_deterministic():
    retriever = LexicalRetriever()
    first = retriever.retrieve("python go", CHUNKS)
    second = retriever.retrieve("python go", CHUNKS)

    assert first == second
