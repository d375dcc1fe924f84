"""Response protocol shared by the prompt composer and the response parser.

The completion service is asked to reply in a fixed, sectioned plain-text
layout. This module is the single definition of that layout: section
markers, separators, bullet and arrow tokens, and the trade-off labels.
Bumping the protocol means adding a new ``ResponseProtocol`` instance and
pointing ``CURRENT_PROTOCOL`` at it.
"""

import re
from typing import Tuple

from pydantic import BaseModel, ConfigDict


def fence_label(language: str) -> str:
    """Sanitize a language name for use as a fence info string."""
    return re.sub(r"[`\r\n]+", " ", language).strip()


class SectionSpec(BaseModel):
    """One section of the response protocol."""

    model_config = ConfigDict(frozen=True)

    key: str
    marker: str
    emoji: str
    # Header as shown in the template; may contain {target_language}
    header: str

    def render_header(self, target_language: str) -> str:
        return f"{self.emoji} {self.header.format(target_language=target_language)}"


class ResponseProtocol(BaseModel):
    """Versioned description of the five-section reply format."""

    model_config = ConfigDict(frozen=True)

    version: str
    sections: Tuple[SectionSpec, ...]
    rule: str
    bullets: Tuple[str, ...]
    arrows: Tuple[str, ...]
    rationale_label: str
    tradeoff_labels: Tuple[str, ...]

    @property
    def markers(self) -> Tuple[str, ...]:
        return tuple(section.marker for section in self.sections)

    def render_template(self, source_language: str, target_language: str) -> str:
        """Render the literal reply template the model must reproduce."""
        bullet = self.bullets[0]
        arrow = self.arrows[0]
        code, points, insight, tradeoffs = self.sections
        gained, lost, mitigation = self.tradeoff_labels

        point_lines = []
        for index in (1, 2):
            point_lines.append(
                f"{bullet} [Pattern {index}]: {source_language} [approach] "
                f"{arrow} {target_language} [approach]\n"
                f"{self.rationale_label} [Why this preserves the invariant]"
            )

        blocks = [
            f"{code.render_header(target_language)}\n\n"
            f"```{fence_label(target_language)}\n"
            f"[Complete, idiomatic, working {target_language} code here]\n"
            "```",
            f"{points.render_header(target_language)}\n\n"
            + "\n\n".join(point_lines)
            + "\n\n[Continue for all key transformations]",
            f"{insight.render_header(target_language)}\n\n"
            "[2-3 sentences explaining what makes this translation work - "
            "the core paradigm shift]",
            f"{tradeoffs.render_header(target_language)}\n\n"
            f"{gained}: [What the target paradigm gives you]\n"
            f"{lost}: [What's different/harder]\n"
            f"{mitigation}: [How to address what's lost]",
        ]
        separator = f"\n\n{self.rule}\n\n"
        return separator.join(blocks) + separator.rstrip()


PROTOCOL_V1 = ResponseProtocol(
    version="1",
    sections=(
        SectionSpec(
            key="translated_code",
            marker="TRANSLATED CODE",
            emoji="✨",
            header="TRANSLATED CODE ({target_language}):",
        ),
        SectionSpec(
            key="synthesis_points",
            marker="SYNTHESIS POINTS:",
            emoji="🧠",
            header="SYNTHESIS POINTS:",
        ),
        SectionSpec(
            key="key_insight",
            marker="KEY INSIGHT:",
            emoji="💡",
            header="KEY INSIGHT:",
        ),
        SectionSpec(
            key="tradeoffs",
            marker="TRADE-OFFS:",
            emoji="⚖️",
            header="TRADE-OFFS:",
        ),
    ),
    rule="━" * 35,
    bullets=("✓", "✔"),
    arrows=("→", "->", "=>"),
    rationale_label="Rationale:",
    tradeoff_labels=("GAINED", "LOST", "MITIGATION"),
)

CURRENT_PROTOCOL = PROTOCOL_V1
