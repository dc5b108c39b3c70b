"""
Unit Tests for FormattingRuleSet
"""

import pytest
from pydantic import ValidationError

from core.formatting.rules import RULE_GROUPS, FormattingRuleSet


class TestPresets:

    def test_default_enables_everything(self):
        rules = FormattingRuleSet.default()
        for group in rules.to_dict().values():
            assert all(group.values())

    def test_minimal(self):
        rules = FormattingRuleSet.minimal()
        assert rules.headers.detect_all_caps is False
        assert rules.headers.enforce_hierarchy is True
        assert rules.references.auto_link is False
        assert rules.references.generate_appendix is False
        assert rules.typography.paragraph_breaks is True

    def test_academic(self):
        rules = FormattingRuleSet.academic()
        assert rules.code.syntax_highlighting is False
        assert rules.code.auto_detect_language is True

    def test_preset_by_name(self):
        assert FormattingRuleSet.preset("minimal") == FormattingRuleSet.minimal()

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown rule preset"):
            FormattingRuleSet.preset("fancy")


class TestConversion:

    def test_to_dict_uses_camel_case_keys(self):
        data = FormattingRuleSet.default().to_dict()
        assert set(data) == set(RULE_GROUPS)
        assert set(data["headers"]) == {
            "detectAllCaps", "detectColons", "detectNumbers", "enforceHierarchy", "titleCase",
        }
        assert set(data["typography"]) == {"smartQuotes", "properSpacing", "paragraphBreaks"}

    def test_from_dict_round_trip(self):
        rules = FormattingRuleSet.minimal()
        assert FormattingRuleSet.from_dict(rules.to_dict()) == rules

    def test_from_dict_partial(self):
        rules = FormattingRuleSet.from_dict({"tables": {"autoAlign": False}})
        assert rules.tables.auto_align is False
        assert rules.tables.add_separators is True
        assert rules.headers == FormattingRuleSet.default().headers

    def test_from_dict_accepts_snake_case(self):
        assert FormattingRuleSet.from_dict({"code": {"syntax_highlighting": False}}).code.syntax_highlighting is False

    def test_from_dict_rejects_unknown_flag(self):
        with pytest.raises(ValidationError):
            FormattingRuleSet.from_dict({"headers": {"detectEmoji": True}})

    def test_from_none(self):
        assert FormattingRuleSet.from_dict(None) == FormattingRuleSet.default()


class TestImmutability:

    def test_frozen(self):
        rules = FormattingRuleSet.default()
        with pytest.raises(ValidationError):
            rules.headers.title_case = False

    def test_with_group_returns_copy(self):
        rules = FormattingRuleSet.default()
        updated = rules.with_group("headers", titleCase=False)
        assert updated.headers.title_case is False
        assert rules.headers.title_case is True
        assert updated.lists == rules.lists

    def test_with_group_snake_case(self):
        updated = FormattingRuleSet.default().with_group("references", auto_link=False)
        assert updated.references.auto_link is False

    @pytest.mark.parametrize("group,flags", [
        ("colors", {"x": True}),
        ("headers", {"detectEmoji": True}),
    ])
    def test_with_group_rejects_unknown(self, group, flags):
        with pytest.raises(ValueError):
            FormattingRuleSet.default().with_group(group, **flags)
