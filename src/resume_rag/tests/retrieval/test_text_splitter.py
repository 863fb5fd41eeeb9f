import pytest

from resume_rag.retrieval.text_splitter import split_into_chunks, split_sentences


RESUME = "Skilled in Go and Rust. Built three scheduler engines. Graduated 2023."


def test_split_sentences_keeps_terminal_punctuation():
    assert split_sentences("One.  Two!\nThree? Four") == ["One.", "Two!", "Three?", "Four"]


def test_blank_text_yields_no_chunks():
    assert split_into_chunks("") == []
    assert split_into_chunks("   \n\t ") == []


@pytest.mark.parametrize("chunk_size", [0, -5])
def test_non_positive_chunk_size_is_rejected(chunk_size):
    with pytest.raises(ValueError):
        split_into_chunks(RESUME, chunk_size=chunk_size)


def test_short_text_is_a_single_chunk():
    assert split_into_chunks(RESUME) == [RESUME]


def test_sentences_are_packed_greedily():
    chunks = split_into_chunks(RESUME, chunk_size=30)

    assert chunks == [
        "Skilled in Go and Rust.",
        "Built three scheduler engines.",
        "Graduated 2023.",
    ]


def test_buffer_emitted_only_when_next_sentence_overflows():
    text = "Aa. Bb. Cc. Dd."
    # "Aa. Bb." is 7 chars, adding " Cc." would make 11
    assert split_into_chunks(text, chunk_size=10) == ["Aa. Bb.", "Cc. Dd."]


def test_oversized_sentence_becomes_its_own_chunk():
    long_sentence = "Designed " + "very " * 30 + "large systems."
    text = f"Short intro. {long_sentence} Outro here."

    chunks = split_into_chunks(text, chunk_size=40)

    assert chunks == ["Short intro.", long_sentence, "Outro here."]
    assert len(chunks[1]) > 40


def test_text_without_punctuation_is_kept_whole():
    text = "  Python Go Rust Kubernetes  "
    assert split_into_chunks(text, chunk_size=5) == ["Python Go Rust Kubernetes"]


def test_chunks_are_trimmed_non_empty_and_bounded():
    text = " ".join(f"Sentence number {i} mentions skill {i}." for i in range(40))

    chunks = split_into_chunks(text, chunk_size=120)

    assert chunks
    for chunk in chunks:
        assert chunk == chunk.strip()
        assert chunk
        assert len(chunk) <= 120
    # no sentence is lost or reordered
    assert " ".join(chunks) == text
