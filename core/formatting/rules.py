#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Formatting Rules - Immutable, grouped rule configuration.

Every job receives its own FormattingRuleSet; nothing in the engine keeps
rule state between calls. Keys are accepted in camelCase
(``{"headers": {"detectAllCaps": false}}``) or snake_case.

Presets:
- default: everything on
- minimal: structural cleanup only, no TOC or appendix
- academic: default without syntax-highlighting tags on code fences
"""

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_snake


class RuleGroup(BaseModel):
    """Base for the boolean option groups."""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )


class HeaderRules(RuleGroup):
    detect_all_caps: bool = Field(default=True, description="Treat ALL CAPS lines as headings")
    detect_colons: bool = Field(default=True, description="Treat 'Title:' lines as headings")
    detect_numbers: bool = Field(default=True, description="Treat '2.3 Title' lines as headings")
    enforce_hierarchy: bool = Field(default=True, description="Rewrite headings as # markers")
    title_case: bool = Field(default=True, description="Capitalize every word of headings")


class ListRules(RuleGroup):
    normalize_markers: bool = Field(default=True, description="Canonical '- ' and 'N. ' markers")
    enforce_indentation: bool = Field(default=True, description="Expand tab indentation of items")
    smart_spacing: bool = Field(default=True, description="Blank line before a list after prose")


class TableRules(RuleGroup):
    auto_align: bool = Field(default=True, description="Pad cells to column width")
    add_separators: bool = Field(default=True, description="Synthesize a missing separator row")
    enforce_structure: bool = Field(default=True, description="Pad short rows with empty cells")


class CodeRules(RuleGroup):
    auto_detect_language: bool = Field(default=True, description="Infer fence language by signature vote")
    syntax_highlighting: bool = Field(default=True, description="Emit the language tag on fences")
    proper_indentation: bool = Field(default=True, description="Trim blank edge lines inside fences")


class ReferenceRules(RuleGroup):
    auto_link: bool = Field(default=True, description="Prepend a linked table of contents")
    generate_appendix: bool = Field(default=True, description="Append a section reference appendix")
    cross_reference: bool = Field(default=True, description="Appendix as link reference definitions")


class TypographyRules(RuleGroup):
    smart_quotes: bool = Field(default=True, description="Straight to curly quotes")
    proper_spacing: bool = Field(default=True, description="Collapse runs of spaces")
    paragraph_breaks: bool = Field(default=True, description="Break paragraphs after sentence ends")


RULE_GROUPS = ("headers", "lists", "tables", "code", "references", "typography")


class FormattingRuleSet(BaseModel):
    """Complete rule configuration for one formatting job."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    headers: HeaderRules = Field(default_factory=HeaderRules)
    lists: ListRules = Field(default_factory=ListRules)
    tables: TableRules = Field(default_factory=TableRules)
    code: CodeRules = Field(default_factory=CodeRules)
    references: ReferenceRules = Field(default_factory=ReferenceRules)
    typography: TypographyRules = Field(default_factory=TypographyRules)

    # ----- presets -----

    @classmethod
    def default(cls) -> "FormattingRuleSet":
        return cls()

    @classmethod
    def minimal(cls) -> "FormattingRuleSet":
        return cls(
            headers=HeaderRules(
                detect_all_caps=False, detect_colons=False, detect_numbers=False,
                enforce_hierarchy=True, title_case=False,
            ),
            lists=ListRules(normalize_markers=True, enforce_indentation=True, smart_spacing=False),
            tables=TableRules(auto_align=True, add_separators=False, enforce_structure=False),
            code=CodeRules(auto_detect_language=False, syntax_highlighting=False, proper_indentation=True),
            references=ReferenceRules(auto_link=False, generate_appendix=False, cross_reference=False),
            typography=TypographyRules(smart_quotes=False, proper_spacing=True, paragraph_breaks=True),
        )

    @classmethod
    def academic(cls) -> "FormattingRuleSet":
        return cls(code=CodeRules(syntax_highlighting=False))

    @classmethod
    def preset(cls, name: str) -> "FormattingRuleSet":
        presets = {
            "default": cls.default,
            "minimal": cls.minimal,
            "academic": cls.academic,
        }
        if name not in presets:
            raise ValueError(f"Unknown rule preset: {name} (expected one of {sorted(presets)})")
        return presets[name]()

    # ----- conversion -----

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "FormattingRuleSet":
        """Build from a nested mapping; missing groups and keys keep defaults."""
        return cls.model_validate(dict(data or {}))

    def to_dict(self) -> Dict[str, Dict[str, bool]]:
        """Nested camelCase mapping, the shape callers configure with."""
        return {group: getattr(self, group).model_dump(by_alias=True) for group in RULE_GROUPS}

    def with_group(self, group: str, **flags: bool) -> "FormattingRuleSet":
        """
        Return a copy with some flags of one group replaced.

        Args:
            group: One of RULE_GROUPS
            **flags: Flag names in snake_case or camelCase

        Raises:
            ValueError: Unknown group or flag
        """
        if group not in RULE_GROUPS:
            raise ValueError(f"Unknown rule group: {group}")
        current = getattr(self, group)
        update = {}
        for key, value in flags.items():
            name = to_snake(key)
            if name not in type(current).model_fields:
                raise ValueError(f"Unknown flag '{key}' for rule group '{group}'")
            update[name] = bool(value)
        merged = {**current.model_dump(), **update}
        return self.model_copy(update={group: type(current)(**merged)})
