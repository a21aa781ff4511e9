"""Prompt templates stored as markdown next to this module.

Templates use ``$name`` placeholders (``string.Template``); substituted values
are inserted verbatim, so user code containing ``$`` or braces is safe.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from string import Template

_PROMPTS_ROOT = Path(__file__).resolve().parent


@lru_cache(maxsize=None)
def load_prompt(*relative_parts: str) -> str:
    """Load a prompt template from ``apps/algoz/prompts``, e.g. ``load_prompt("debug.md")``."""

    path = _PROMPTS_ROOT.joinpath(*relative_parts)
    if not path.exists():  # pragma: no cover - guard for missing assets
        raise FileNotFoundError(f"Prompt template missing: {path}")
    return path.read_text(encoding="utf-8").strip()


def render_prompt(name: str, **values: str) -> str:
    """Fill a template; every placeholder must be supplied."""
    return Template(load_prompt(name)).substitute(**values)


__all__ = ["load_prompt", "render_prompt"]
