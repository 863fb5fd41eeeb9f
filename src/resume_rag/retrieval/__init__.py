"""
Retrieval layer of the resume question-answering pipeline.

This package covers everything between an uploaded file and the handful of
chunks handed to the prompt assembler: text extraction, single-slot storage,
sentence-bounded chunking, term-frequency vectorization and cosine ranking.

Submodules
----------
document_loader
    PDF/DOCX text extraction and resume ingestion.
document_store
    Single-slot resume stores (memory, JSON file).
text_splitter
    Sentence-bounded chunking.
vectorizer
    Per-query vocabularies, term-frequency vectors and cosine similarity.
retriever
    Lexical ranker returning the top-k chunks for a question.
types
    Retriever protocol.
"""
