"""Commit-message policy as a static rule table.

Conventional-commit defaults plus the project's own overrides: a 72
character header, kebab-case scopes, a closed list of types and no
work-in-progress commits.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class RuleLevel(IntEnum):
    DISABLED = 0
    WARNING = 1
    ERROR = 2


class Applicability(str, Enum):
    """Whether the rule's condition must hold (``always``) or must not (``never``)."""

    ALWAYS = "always"
    NEVER = "never"


class Rule(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    level: RuleLevel
    applicability: Applicability = Applicability.ALWAYS
    value: Any = None


ALLOWED_TYPES: tuple[str, ...] = (
    "feat",      # New feature
    "fix",       # Bug fix
    "docs",      # Documentation changes
    "style",     # Formatting, missing semicolons, etc.
    "refactor",  # Code refactoring
    "perf",      # Performance improvements
    "test",      # Tests
    "chore",     # Routine tasks (build, dependencies, etc.)
    "ci",        # Continuous integration
    "release",   # Version release
)

HEADER_MAX_LENGTH = 72
LINE_MAX_LENGTH = 100

DEFAULT_RULES: tuple[Rule, ...] = (
    Rule(name="header-max-length", level=RuleLevel.ERROR, value=HEADER_MAX_LENGTH),
    Rule(name="scope-case", level=RuleLevel.ERROR, value="kebab-case"),
    Rule(name="type-enum", level=RuleLevel.ERROR, value=ALLOWED_TYPES),
    Rule(name="no-wip", level=RuleLevel.ERROR, applicability=Applicability.NEVER),
    Rule(name="type-case", level=RuleLevel.ERROR, value="lower-case"),
    Rule(name="type-empty", level=RuleLevel.ERROR, applicability=Applicability.NEVER),
    Rule(name="subject-empty", level=RuleLevel.ERROR, applicability=Applicability.NEVER),
    Rule(
        name="subject-full-stop",
        level=RuleLevel.ERROR,
        applicability=Applicability.NEVER,
        value=".",
    ),
    Rule(name="body-leading-blank", level=RuleLevel.WARNING),
    Rule(name="footer-leading-blank", level=RuleLevel.WARNING),
    Rule(name="body-max-line-length", level=RuleLevel.ERROR, value=LINE_MAX_LENGTH),
    Rule(name="footer-max-line-length", level=RuleLevel.ERROR, value=LINE_MAX_LENGTH),
)
