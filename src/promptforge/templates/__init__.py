"""Bundled plan templates used by ``promptforge init``."""

from promptforge.templates.registry import (
    DEFAULT_TEMPLATE,
    PlanTemplate,
    get_template,
    list_templates,
    render_plan,
    render_template,
)

__all__ = [
    "DEFAULT_TEMPLATE",
    "PlanTemplate",
    "get_template",
    "list_templates",
    "render_plan",
    "render_template",
]
