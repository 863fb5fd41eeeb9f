"""resume_rag.generation.prompt_builder

Grounding prompt templates and rendering.

Prompts are Jinja2 templates registered by name from JSON definitions. The
package ships one template per answer mode (``resume_recommend`` and
``resume_strict``) in ``resume_rag/prompts/default.json``; additional JSON
files may override them. Rendered prompts are plain, backend-agnostic text.

Classes
-------
PromptTemplate
    A single named template (system text plus user text).
PromptBuilder
    Registry of templates with JSON loading helpers.

Functions
---------
template_name_for
    Template name used for an answer mode.
assemble_prompt
    Render the grounding prompt for a question and its ranked chunks.
"""
from __future__ import annotations

import json
import warnings
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from jinja2 import StrictUndefined, Template

from resume_rag.common.schemas import AnswerMode

DEFAULT_PROMPT_PACKAGE = "resume_rag.prompts"
DEFAULT_PROMPT_RESOURCE = "default.json"
CHUNK_SEPARATOR = "\n\n"


class PromptTemplate:
    """A named prompt template.

    Parameters
    ----------
    name : str
        Template name.
    system : str or None, optional
        Role and grounding instructions, rendered first.
    user : str, optional
        Body of the prompt (resume extract and question sections).
    """

    def __init__(self, name: str, system: Optional[str] = None, user: str = ""):
        self.name = name
        self.system = system
        self.user = user or ""

    def render(self, **kwargs: Any) -> str:
        """Render the template with ``kwargs``.

        The system and user parts are joined by a newline before rendering.
        Missing variables raise :class:`jinja2.exceptions.UndefinedError`.
        """
        parts = [p for p in (self.system, self.user) if p]
        return Template("\n".join(parts), undefined=StrictUndefined).render(**kwargs)


class PromptBuilder:
    """Registry of :class:`PromptTemplate` objects."""

    def __init__(self):
        self.templates: Dict[str, PromptTemplate] = {}

    @classmethod
    def with_defaults(cls) -> "PromptBuilder":
        """Return a builder with the packaged templates registered."""
        builder = cls()
        builder.register_from_package(DEFAULT_PROMPT_PACKAGE, DEFAULT_PROMPT_RESOURCE)
        return builder

    def register_from_dict(self, data: Dict[str, Any]) -> str:
        """Register a template from a mapping with ``name``, ``system`` and ``user`` keys.

        Returns
        -------
        str
            The registered template name.

        Raises
        ------
        KeyError
            If ``name`` is missing.
        TypeError, ValueError
            If ``name`` is not a non-empty string.
        """
        if "name" not in data:
            raise KeyError("Template definition missing required key: 'name'")
        name = data["name"]
        if not isinstance(name, str):
            raise TypeError(f"Template 'name' must be a str, got {type(name)!r}")
        if not name.strip():
            raise ValueError("Template 'name' must be a non-empty string")

        if name in self.templates:
            warnings.warn(f"Overwriting existing prompt template: {name}")
        self.templates[name] = PromptTemplate(name=name, system=data.get("system"), user=data.get("user") or "")
        return name

    def _register_json(self, data: Any, origin: str) -> List[str]:
        if isinstance(data, dict):
            return [self.register_from_dict(data)]
        if isinstance(data, list):
            names = []
            for item in data:
                if not isinstance(item, dict):
                    raise TypeError(f"Template list items in {origin} must be dicts, got {type(item)!r}")
                names.append(self.register_from_dict(item))
            return names
        raise TypeError(f"{origin} must contain an object or list of objects, got {type(data)!r}")

    def register_from_file(self, path: Path | str, base_dir: Optional[Path] = None) -> List[str]:
        """Register templates from a JSON file.

        Relative paths are resolved against ``base_dir`` when given.
        """
        p = Path(path)
        if not p.is_absolute() and base_dir is not None:
            p = base_dir / p
        if not p.exists():
            raise FileNotFoundError(f"Prompt file not found: {p}")
        if p.suffix.lower() != ".json":
            raise ValueError(f"Unsupported file type: {p.suffix}")
        with p.open("r", encoding="utf-8") as f:
            return self._register_json(json.load(f), str(p))

    def register_from_package(self, package: str, resource_path: str) -> List[str]:
        """Register templates from a JSON resource bundled in ``package``."""
        res = resources.files(package).joinpath(resource_path)
        if not res.is_file():
            raise FileNotFoundError(f"Prompt resource not found: pkg:{package}:{resource_path}")
        return self._register_json(json.loads(res.read_text(encoding="utf-8")), f"pkg:{package}:{resource_path}")

    def register_from_source(self, source: str, base_dir: Optional[Path] = None) -> List[str]:
        """Register templates from ``pkg:<package>:<resource>``, ``file:<path>`` or a plain path."""
        if source.startswith("pkg:"):
            rest = source[len("pkg:"):]
            if ":" not in rest:
                raise ValueError("pkg: sources must be of the form 'pkg:<package>:<resource_path>'")
            package, resource_path = rest.split(":", 1)
            return self.register_from_package(package.strip(), resource_path.strip())
        if source.startswith("file:"):
            source = source[len("file:"):].strip()
        return self.register_from_file(source, base_dir=base_dir)

    def has_prompt(self, name: str) -> bool:
        return name in self.templates

    def list_prompts(self) -> List[str]:
        return sorted(self.templates)

    def build(self, name: str, **kwargs: Any) -> str:
        """Render the template registered under ``name``.

        Raises
        ------
        KeyError
            If no template is registered under ``name``.
        """
        if name not in self.templates:
            available = ", ".join(self.list_prompts())
            raise KeyError(f"No template registered under name: {name}. Available: [{available}]")
        return self.templates[name].render(**kwargs)


def template_name_for(mode: AnswerMode | str) -> str:
    """Return the template name for ``mode`` (``resume_recommend`` / ``resume_strict``)."""
    return f"resume_{AnswerMode.parse(mode).value}"


def assemble_prompt(
        question: str,
        ranked_chunks: Sequence[str],
        mode: AnswerMode | str = AnswerMode.RECOMMEND,
        builder: Optional[PromptBuilder] = None,
    ) -> str:
    """Render the grounding prompt for ``question``.

    Parameters
    ----------
    question : str
        The user's question.
    ranked_chunks : Sequence[str]
        Resume chunks, most relevant first. They are joined with a blank line.
    mode : AnswerMode or str, optional
        Selects the template. Defaults to ``recommend``.
    builder : PromptBuilder or None, optional
        Template registry. The packaged templates are used when ``None``.

    Returns
    -------
    str
        The rendered prompt.
    """
    builder = builder or PromptBuilder.with_defaults()
    return builder.build(
        template_name_for(mode),
        question=question.strip(),
        resume_extract=CHUNK_SEPARATOR.join(ranked_chunks),
        chunks=list(ranked_chunks),
    )


__all__ = [
    "PromptBuilder",
    "PromptTemplate",
    "assemble_prompt",
    "template_name_for",
]
