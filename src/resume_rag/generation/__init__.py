"""resume_rag.generation

Prompt assembly and answer generation.

Modules
-------
prompt_builder
    Jinja2 grounding templates and :func:`assemble_prompt`.
llm_interface
    Gemini (primary) and OpenAI-compatible chat (fallback) backends.
response_decoder
    Tagged-variant decoding of Gemini response bodies.
orchestrator
    Retry, rate-limit and fallback handling around the backends.
sanitizer
    Boilerplate removal from raw answers.
answer_cache
    TTL cache of generated answers.
"""
