"""Commit-message policy: the rule table and a linter that applies it."""

from skyforge.commitlint.linter import (
    CommitMessage,
    LintProblem,
    LintResult,
    lint_commit_message,
    parse_commit_message,
)
from skyforge.commitlint.rules import ALLOWED_TYPES, DEFAULT_RULES, Rule, RuleLevel

__all__ = [
    "ALLOWED_TYPES",
    "DEFAULT_RULES",
    "Rule",
    "RuleLevel",
    "CommitMessage",
    "LintProblem",
    "LintResult",
    "lint_commit_message",
    "parse_commit_message",
]
