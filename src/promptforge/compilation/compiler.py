"""
promptforge — plan to PromptIR compiler

File: src/promptforge/compilation/compiler.py
Last updated: 2026-10-19

Purpose
- Compile a parsed plan into a PromptIR, optionally with a provenance ("explain") report.

What should be included in this file
- The fixed baseline rules and failure modes, always emitted first.
- Rule and failure-mode generation from Constraints and Out of Scope, in document order.
- System role generation from the Goal.

Functional requirements
- The IR and its explain report come out of one builder so they never diverge.
- Baseline identifiers are reserved before any generated identifier is allocated.

Non-functional requirements
- Deterministic and free of I/O: same document, same bytes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from promptforge.constants import (
    CURRENT_IR_VERSION,
    SECTION_CONSTRAINTS,
    SECTION_GOAL,
    SECTION_OUT_OF_SCOPE,
)
from promptforge.domain.errors import PlanStructureError
from promptforge.domain.ids import FAILURE_MODE_PROFILE, RULE_PROFILE, IdentifierAllocator
from promptforge.domain.models import (
    ExplainFailureMode,
    ExplainReport,
    ExplainRule,
    ExplainSchema,
    ExplainSource,
    ExplainValue,
    FailureMode,
    Plan,
    PromptIR,
    Rule,
    Schema,
)
from promptforge.plan_ingestion.parser import parse_plan

DEFAULT_SYSTEM_ROLE: Final[str] = (
    "You are a deterministic assistant that follows strict rules and schemas."
)
SYSTEM_ROLE_TEMPLATE: Final[str] = (
    "You are an assistant designed to: {goal} "
    "You must follow all specified rules and constraints strictly."
)
OBJECT_SCHEMA_TYPE: Final[str] = "object"

BASELINE_RULES: Final[tuple[Rule, ...]] = (
    Rule(id="output-json", description="Output must be valid JSON"),
    Rule(
        id="no-explanations",
        description="Do not include explanations unless explicitly requested",
    ),
    Rule(
        id="no-inference",
        description="Do not infer missing values - fail if required data is missing",
    ),
    Rule(
        id="fail-ambiguity",
        description="Fail on ambiguity - request clarification if intent is unclear",
    ),
)

BASELINE_FAILURE_MODES: Final[tuple[FailureMode, ...]] = (
    FailureMode(
        id="invalid-input",
        condition="Input does not match input_schema",
        response="Return error indicating schema validation failure",
    ),
    FailureMode(
        id="ambiguous-request",
        condition="Request cannot be unambiguously interpreted",
        response="Return error indicating ambiguity and request clarification",
    ),
    FailureMode(
        id="missing-required",
        condition="Required fields are missing from input",
        response="Return error listing missing required fields",
    ),
)

_TERMINAL_PUNCTUATION: Final[tuple[str, ...]] = (".", "!", "?")


def generate_system_role(goal: str) -> str:
    if goal == "":
        return DEFAULT_SYSTEM_ROLE
    goal = goal.strip()
    if goal and "a" <= goal[0] <= "z":
        goal = goal[0].upper() + goal[1:]
    if not goal.endswith(_TERMINAL_PUNCTUATION):
        goal += "."
    return SYSTEM_ROLE_TEMPLATE.format(goal=goal)


def out_of_scope_condition(item: str) -> str:
    return f"Request involves: {item}"


def out_of_scope_response(item: str) -> str:
    return f"Return error indicating that {item} is out of scope and cannot be handled"


def _baseline(value: str) -> ExplainValue:
    return ExplainValue(value=value, source=ExplainSource.baseline())


def _from_plan(value: str, section: str, line: int) -> ExplainValue:
    return ExplainValue(value=value, source=ExplainSource.plan(section, line))


@dataclass(slots=True)
class _Builder:
    """Accumulates IR fields and their provenance side by side."""

    plan: Plan
    rules: list[Rule] = field(default_factory=list)
    rule_sources: list[ExplainRule] = field(default_factory=list)
    failure_modes: list[FailureMode] = field(default_factory=list)
    failure_mode_sources: list[ExplainFailureMode] = field(default_factory=list)

    def add_baselines(self) -> None:
        for rule in BASELINE_RULES:
            self.rules.append(rule)
            self.rule_sources.append(
                ExplainRule(id=_baseline(rule.id), description=_baseline(rule.description))
            )
        for mode in BASELINE_FAILURE_MODES:
            self.failure_modes.append(mode)
            self.failure_mode_sources.append(
                ExplainFailureMode(
                    id=_baseline(mode.id),
                    condition=_baseline(mode.condition),
                    response=_baseline(mode.response),
                )
            )

    def add_constraints(self) -> None:
        allocator = IdentifierAllocator(RULE_PROFILE, (rule.id for rule in BASELINE_RULES))
        for index, item in enumerate(self.plan.constraints):
            description = item.text.strip()
            if not description:
                continue
            rule_id = allocator.allocate(description, index)
            self.rules.append(Rule(id=rule_id, description=description))
            self.rule_sources.append(
                ExplainRule(
                    id=_from_plan(rule_id, SECTION_CONSTRAINTS, item.line),
                    description=_from_plan(description, SECTION_CONSTRAINTS, item.line),
                )
            )

    def add_out_of_scope(self) -> None:
        allocator = IdentifierAllocator(
            FAILURE_MODE_PROFILE, (mode.id for mode in BASELINE_FAILURE_MODES)
        )
        for index, item in enumerate(self.plan.out_of_scope):
            text = item.text.strip()
            if not text:
                continue
            mode = FailureMode(
                id=allocator.allocate(text, index),
                condition=out_of_scope_condition(text),
                response=out_of_scope_response(text),
            )
            self.failure_modes.append(mode)
            self.failure_mode_sources.append(
                ExplainFailureMode(
                    id=_from_plan(mode.id, SECTION_OUT_OF_SCOPE, item.line),
                    condition=_from_plan(mode.condition, SECTION_OUT_OF_SCOPE, item.line),
                    response=_from_plan(mode.response, SECTION_OUT_OF_SCOPE, item.line),
                )
            )

    def finish(self) -> tuple[PromptIR, ExplainReport]:
        system_role = generate_system_role(self.plan.goal)
        ir = PromptIR(
            version=CURRENT_IR_VERSION,
            system_role=system_role,
            rules=tuple(self.rules),
            input_schema=Schema(type=OBJECT_SCHEMA_TYPE),
            output_schema=Schema(type=OBJECT_SCHEMA_TYPE),
            failure_modes=tuple(self.failure_modes),
        )
        report = ExplainReport(
            version=_baseline(ir.version),
            system_role=_from_plan(system_role, SECTION_GOAL, self.plan.goal_line),
            rules=tuple(self.rule_sources),
            input_schema=ExplainSchema(type=_baseline(ir.input_schema.type)),
            output_schema=ExplainSchema(type=_baseline(ir.output_schema.type)),
            failure_modes=tuple(self.failure_mode_sources),
        )
        return ir, report


def build_ir(plan: Plan) -> tuple[PromptIR, ExplainReport]:
    builder = _Builder(plan=plan)
    builder.add_baselines()
    builder.add_constraints()
    builder.add_out_of_scope()
    return builder.finish()


def _parse(content: bytes | str) -> Plan:
    try:
        return parse_plan(content)
    except PlanStructureError as exc:
        raise PlanStructureError(f"failed to parse plan: {exc}", line=exc.line) from exc


def compile_plan(content: bytes | str) -> PromptIR:
    """Compile plan document content into a PromptIR."""

    ir, _ = build_ir(_parse(content))
    return ir


def compile_plan_with_explain(content: bytes | str) -> tuple[PromptIR, ExplainReport]:
    """Compile plan document content, also returning the provenance report."""

    return build_ir(_parse(content))


__all__ = [
    "BASELINE_FAILURE_MODES",
    "BASELINE_RULES",
    "DEFAULT_SYSTEM_ROLE",
    "build_ir",
    "compile_plan",
    "compile_plan_with_explain",
    "generate_system_role",
    "out_of_scope_condition",
    "out_of_scope_response",
]
