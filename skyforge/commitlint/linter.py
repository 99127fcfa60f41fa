"""Commit-message parsing and linting against a rule table."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from pydantic import BaseModel, ConfigDict

from skyforge.commitlint.rules import DEFAULT_RULES, Applicability, Rule, RuleLevel

_HEADER = re.compile(
    r"^(?P<type>\w+)(?:\((?P<scope>[^()\r\n]*)\))?(?P<breaking>!)?: (?P<subject>.*)$"
)
_FOOTER_TOKEN = re.compile(r"^(?:BREAKING[ -]CHANGE|[A-Za-z][\w-]*)(?:: | #)")
_WIP = re.compile(r"\bwip\b", re.IGNORECASE)
_KEBAB = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_SCOPE_SEPARATORS = re.compile(r"[/\\,]")
_IGNORED = (
    re.compile(r"^Merge (?:branch|pull request|remote-tracking branch|tag) "),
    re.compile(r'^Revert "'),
    re.compile(r"^(?:fixup|squash|amend)! "),
)


class CommitMessage(BaseModel):
    """A commit message split into its conventional-commit parts."""

    model_config = ConfigDict(frozen=True)

    raw: str
    header: str
    type: str | None = None
    scope: str | None = None
    breaking: bool = False
    subject: str | None = None
    body_lines: tuple[str, ...] = ()
    footer_lines: tuple[str, ...] = ()
    body_leading_blank: bool = True
    footer_leading_blank: bool = True

    @property
    def scopes(self) -> list[str]:
        if not self.scope:
            return []
        return [s.strip() for s in _SCOPE_SEPARATORS.split(self.scope) if s.strip()]


class LintProblem(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule: str
    level: RuleLevel
    message: str


class LintResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    input: str
    problems: tuple[LintProblem, ...] = ()
    ignored: bool = False

    @property
    def errors(self) -> list[LintProblem]:
        return [p for p in self.problems if p.level == RuleLevel.ERROR]

    @property
    def warnings(self) -> list[LintProblem]:
        return [p for p in self.problems if p.level == RuleLevel.WARNING]

    @property
    def valid(self) -> bool:
        return not self.errors


def parse_commit_message(text: str) -> CommitMessage:
    """Split *text* into header, body and footer.

    Comment lines (``#``, as left by ``git commit``) and trailing blank
    lines are dropped. The footer starts at the first line after the header
    that looks like a trailer (``Token: value``, ``Token #ref`` or
    ``BREAKING CHANGE: ...``).
    """
    lines = [line.rstrip() for line in text.splitlines() if not line.startswith("#")]
    while lines and not lines[-1]:
        lines.pop()
    header = lines[0] if lines else ""
    rest = lines[1:]

    footer_start = next(
        (i for i, line in enumerate(rest) if _FOOTER_TOKEN.match(line)), len(rest)
    )
    body = rest[:footer_start]
    footer = rest[footer_start:]
    has_body = any(line for line in body)

    fields: dict[str, object] = {}
    match = _HEADER.match(header)
    if match:
        fields = {
            "type": match.group("type"),
            "scope": match.group("scope"),
            "breaking": bool(match.group("breaking")),
            "subject": match.group("subject").strip() or None,
        }

    return CommitMessage(
        raw=text,
        header=header,
        body_lines=tuple(body) if has_body else (),
        footer_lines=tuple(footer),
        body_leading_blank=not has_body or rest[0] == "",
        footer_leading_blank=not footer or (footer_start > 0 and rest[footer_start - 1] == ""),
        **fields,
    )


# ---------------------------------------------------------------------------
# Conditions: does the message have this property?
# ---------------------------------------------------------------------------

Condition = Callable[[CommitMessage, Rule], bool]


def _header_max_length(msg: CommitMessage, rule: Rule) -> bool:
    return len(msg.header) <= rule.value


def _scope_case(msg: CommitMessage, rule: Rule) -> bool:
    return all(_KEBAB.match(scope) for scope in msg.scopes)


def _type_enum(msg: CommitMessage, rule: Rule) -> bool:
    return not msg.type or msg.type in rule.value


def _no_wip(msg: CommitMessage, rule: Rule) -> bool:
    return bool(_WIP.search(msg.header))


def _type_case(msg: CommitMessage, rule: Rule) -> bool:
    return not msg.type or msg.type == msg.type.lower()


def _type_empty(msg: CommitMessage, rule: Rule) -> bool:
    return not msg.type


def _subject_empty(msg: CommitMessage, rule: Rule) -> bool:
    return not msg.subject


def _subject_full_stop(msg: CommitMessage, rule: Rule) -> bool:
    return bool(msg.subject) and msg.subject.endswith(rule.value)


def _body_leading_blank(msg: CommitMessage, rule: Rule) -> bool:
    return msg.body_leading_blank


def _footer_leading_blank(msg: CommitMessage, rule: Rule) -> bool:
    return msg.footer_leading_blank


def _body_max_line_length(msg: CommitMessage, rule: Rule) -> bool:
    return all(len(line) <= rule.value for line in msg.body_lines)


def _footer_max_line_length(msg: CommitMessage, rule: Rule) -> bool:
    return all(len(line) <= rule.value for line in msg.footer_lines)


CONDITIONS: dict[str, tuple[Condition, str]] = {
    "header-max-length": (
        _header_max_length, "header must not be longer than {value} characters",
    ),
    "scope-case": (_scope_case, "scope must be {value}"),
    "type-enum": (_type_enum, "type must be one of [{value}]"),
    "no-wip": (_no_wip, "work-in-progress commits are not allowed"),
    "type-case": (_type_case, "type must be {value}"),
    "type-empty": (_type_empty, "type may not be empty"),
    "subject-empty": (_subject_empty, "subject may not be empty"),
    "subject-full-stop": (_subject_full_stop, "subject may not end with '{value}'"),
    "body-leading-blank": (_body_leading_blank, "body must have a leading blank line"),
    "footer-leading-blank": (
        _footer_leading_blank, "footer must have a leading blank line",
    ),
    "body-max-line-length": (
        _body_max_line_length, "body lines must not be longer than {value} characters",
    ),
    "footer-max-line-length": (
        _footer_max_line_length,
        "footer lines must not be longer than {value} characters",
    ),
}


class UnknownRuleError(KeyError):
    """Raised when a rule table names a rule the linter cannot evaluate."""


def lint_commit_message(
    text: str, rules: Iterable[Rule] = DEFAULT_RULES
) -> LintResult:
    """Check *text* against *rules*.

    A rule with ``always`` is violated when its condition does not hold,
    one with ``never`` when it does. Merge, revert and fixup headers
    generated by git are ignored.
    """
    msg = parse_commit_message(text)
    if any(pattern.match(msg.header) for pattern in _IGNORED):
        return LintResult(input=text, ignored=True)

    problems: list[LintProblem] = []
    for rule in rules:
        if rule.level == RuleLevel.DISABLED:
            continue
        try:
            condition, template = CONDITIONS[rule.name]
        except KeyError:
            raise UnknownRuleError(rule.name) from None

        holds = condition(msg, rule)
        if holds != (rule.applicability == Applicability.ALWAYS):
            value = ", ".join(rule.value) if isinstance(rule.value, tuple) else rule.value
            problems.append(
                LintProblem(
                    rule=rule.name,
                    level=rule.level,
                    message=template.format(value=value),
                )
            )

    return LintResult(input=text, problems=tuple(problems))
