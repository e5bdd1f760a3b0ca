"""
promptforge — plan template registry

File: src/promptforge/templates/registry.py
Last updated: 2026-10-19

Purpose
- Load the bundled plan templates and render one into a starting plan.md.

What should be included in this file
- YAML loading of ``plan_templates.yaml`` next to this module.
- Strict Jinja2 rendering: an undeclared variable is an error, not an empty string.

Functional requirements
- Template order in listings is the order in the data file.
- Unknown template names raise TemplateError.

Non-functional requirements
- Rendering is deterministic for the same name and goal.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Final

import yaml
from jinja2 import Environment, StrictUndefined, TemplateError as JinjaTemplateError

from promptforge.domain.errors import TemplateError

DEFAULT_TEMPLATE: Final[str] = "blank"


@dataclass(frozen=True, slots=True)
class PlanTemplate:
    name: str
    description: str
    goal: str
    plan: str


def _bundled_templates_path() -> Path:
    return Path(__file__).resolve().with_name("plan_templates.yaml")


def _environment() -> Environment:
    return Environment(
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=False,
        lstrip_blocks=False,
        newline_sequence="\n",
        keep_trailing_newline=True,
    )


def _require_text(entry: dict[str, object], key: str, index: int) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        raise TemplateError(f"templates[{index}].{key} must be a non-empty string")
    return value


def parse_templates(raw_text: str) -> tuple[PlanTemplate, ...]:
    """Parse the YAML template registry document."""

    try:
        payload = yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        raise TemplateError(f"invalid template registry YAML: {exc}") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("templates"), list):
        raise TemplateError("template registry must contain a 'templates' list")

    templates: list[PlanTemplate] = []
    seen: set[str] = set()
    for index, entry in enumerate(payload["templates"]):
        if not isinstance(entry, dict):
            raise TemplateError(f"templates[{index}] must be a mapping")
        template = PlanTemplate(
            name=_require_text(entry, "name", index).strip(),
            description=_require_text(entry, "description", index).strip(),
            goal=_require_text(entry, "goal", index).strip(),
            plan=_require_text(entry, "plan", index),
        )
        if template.name in seen:
            raise TemplateError(f"duplicate template name: {template.name}")
        seen.add(template.name)
        templates.append(template)
    return tuple(templates)


@lru_cache(maxsize=1)
def _bundled_templates() -> tuple[PlanTemplate, ...]:
    path = _bundled_templates_path()
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TemplateError(f"unable to read template registry {path}: {exc}") from exc
    return parse_templates(raw_text)


def list_templates() -> tuple[PlanTemplate, ...]:
    return _bundled_templates()


def get_template(name: str) -> PlanTemplate:
    for template in _bundled_templates():
        if template.name == name:
            return template
    raise TemplateError(f"unknown template: {name}")


def render_template(template: PlanTemplate, goal: str = "") -> str:
    """Render ``template`` with ``goal``, falling back to the template's own goal."""

    effective_goal = goal.strip() or template.goal
    try:
        return _environment().from_string(template.plan).render(goal=effective_goal)
    except JinjaTemplateError as exc:
        raise TemplateError(f"failed to render template {template.name}: {exc}") from exc


def render_plan(name: str | None = None, goal: str = "") -> str:
    return render_template(get_template(name or DEFAULT_TEMPLATE), goal)


__all__ = [
    "DEFAULT_TEMPLATE",
    "PlanTemplate",
    "get_template",
    "list_templates",
    "parse_templates",
    "render_plan",
    "render_template",
]
