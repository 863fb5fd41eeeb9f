"""resume_rag.app

Application wiring: the component container and the FastAPI service.
"""
