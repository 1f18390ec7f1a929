"""
Markup component models and configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.rules.models import MarkupRules


@dataclass(frozen=True)
class MarkupConfig:
    """Inline markup rendering configuration from rules."""

    forbid_protocols: frozenset[str] = field(
        default_factory=lambda: frozenset(["javascript:", "data:", "vbscript:"])
    )

    # Link rel attributes to add
    add_noopener: bool = True
    add_noreferrer: bool = True
    add_ugc: bool = False

    # Presentation classes attached to generated elements
    link_class: str = "text-blue-600 hover:underline"
    mention_class: str = "text-blue-600 font-medium"
    code_class: str = "bg-gray-100 px-1 py-0.5 rounded text-sm"

    @classmethod
    def from_rules(cls, rules: MarkupRules) -> MarkupConfig:
        return cls(
            forbid_protocols=frozenset(p.lower() for p in rules.forbidden_protocols),
            add_noopener=rules.link_rel.noopener,
            add_noreferrer=rules.link_rel.noreferrer,
            add_ugc=rules.link_rel.ugc,
            link_class=rules.link_class,
            mention_class=rules.mention_class,
            code_class=rules.code_class,
        )


DEFAULT_CONFIG = MarkupConfig()
