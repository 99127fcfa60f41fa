"""Tests for commit-message parsing and the commit policy."""

from __future__ import annotations

import pytest

from skyforge.commitlint import (
    ALLOWED_TYPES,
    DEFAULT_RULES,
    Rule,
    RuleLevel,
    lint_commit_message,
    parse_commit_message,
)
from skyforge.commitlint.linter import UnknownRuleError


def rules_broken(text: str) -> set[str]:
    return {p.rule for p in lint_commit_message(text).problems}


class TestParse:
    def test_header_parts(self):
        msg = parse_commit_message("feat(site-build)!: add preview deploys")
        assert msg.type == "feat"
        assert msg.scope == "site-build"
        assert msg.breaking is True
        assert msg.subject == "add preview deploys"

    def test_body_and_footer(self):
        msg = parse_commit_message(
            "fix: handle empty schema\n\nThe API layer crashed.\n\nRefs: #12\nBREAKING CHANGE: x"
        )
        assert msg.body_lines == ("", "The API layer crashed.", "")
        assert msg.footer_lines == ("Refs: #12", "BREAKING CHANGE: x")
        assert msg.body_leading_blank and msg.footer_leading_blank

    def test_comments_stripped(self):
        msg = parse_commit_message("docs: update readme\n# Please enter the commit message\n")
        assert msg.body_lines == ()
        assert msg.header == "docs: update readme"

    def test_unparseable_header(self):
        msg = parse_commit_message("just some words")
        assert msg.type is None and msg.subject is None

    def test_multiple_scopes(self):
        assert parse_commit_message("fix(api/auth): x").scopes == ["api", "auth"]


class TestPolicy:
    def test_rule_table(self):
        by_name = {r.name: r for r in DEFAULT_RULES}
        assert by_name["header-max-length"].value == 72
        assert by_name["scope-case"].value == "kebab-case"
        assert by_name["type-enum"].value == ALLOWED_TYPES
        assert "release" in ALLOWED_TYPES
        assert by_name["body-leading-blank"].level == RuleLevel.WARNING

    @pytest.mark.parametrize(
        "text",
        [
            "feat: add website bucket",
            "fix(site-build): pass region to the build",
            "chore(deps)!: bump provider",
            "release: 1.2.0",
            "docs: explain setup\n\nLonger explanation here.\n\nRefs: #4",
        ],
    )
    def test_valid_messages(self, text: str):
        result = lint_commit_message(text)
        assert result.valid, result.problems
        assert result.warnings == []

    def test_header_too_long(self):
        assert "header-max-length" in rules_broken("feat: " + "x" * 67)

    def test_header_at_limit(self):
        assert "header-max-length" not in rules_broken("feat: " + "x" * 66)

    def test_scope_not_kebab(self):
        assert "scope-case" in rules_broken("feat(MyScope): add")
        assert "scope-case" in rules_broken("feat(SiteBuild): add")
        assert "scope-case" in rules_broken("feat(site_build): add")

    def test_unknown_type(self):
        assert "type-enum" in rules_broken("feature: add bucket")

    def test_wip_type(self):
        broken = rules_broken("wip: x")
        assert "type-enum" in broken
        assert "no-wip" in broken

    def test_upper_case_type(self):
        broken = rules_broken("Feat: add bucket")
        assert "type-case" in broken
        assert "type-enum" in broken

    @pytest.mark.parametrize("text", ["WIP: half done", "feat: wip on pipeline", "fix(wip): x"])
    def test_work_in_progress(self, text: str):
        assert "no-wip" in rules_broken(text)

    def test_wip_inside_word_allowed(self):
        assert "no-wip" not in rules_broken("fix: wipe stale artifacts")

    def test_missing_type_and_subject(self):
        broken = rules_broken("no conventional header")
        assert {"type-empty", "subject-empty"} <= broken

    def test_full_stop(self):
        assert "subject-full-stop" in rules_broken("feat: add bucket.")

    def test_body_without_blank_line_warns(self):
        result = lint_commit_message("feat: add bucket\nbody right away")
        assert result.valid
        assert [w.rule for w in result.warnings] == ["body-leading-blank"]

    def test_long_body_line(self):
        assert "body-max-line-length" in rules_broken("feat: x\n\n" + "y" * 101)

    def test_long_footer_line(self):
        assert "footer-max-line-length" in rules_broken("feat: x\n\nRefs: " + "1" * 100)

    @pytest.mark.parametrize(
        "text",
        [
            "Merge branch 'main' into feature",
            'Revert "feat: add bucket"',
            "fixup! feat: add bucket",
        ],
    )
    def test_generated_headers_ignored(self, text: str):
        result = lint_commit_message(text)
        assert result.ignored and result.valid

    def test_disabled_rule_skipped(self):
        rules = [Rule(name="type-enum", level=RuleLevel.DISABLED, value=("feat",))]
        assert lint_commit_message("chore: x", rules).valid

    def test_unknown_rule(self):
        with pytest.raises(UnknownRuleError):
            lint_commit_message("feat: x", [Rule(name="made-up", level=RuleLevel.ERROR)])
