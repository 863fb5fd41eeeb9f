"""Bundled Jinja2 prompt templates (JSON) for the answer modes."""
