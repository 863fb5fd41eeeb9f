"""resume_rag.pipelines

Pipeline orchestration for resume question answering.

Pipelines coordinate retrieval, prompt construction and generation. They are
stateless beyond their configured components, so one instance can serve
every request.

Modules
-------
resume_pipeline
    End-to-end question answering over the uploaded resume.
"""
