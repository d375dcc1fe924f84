"""Response parser for translation replies.

This module turns the model's free-text reply into a ParsedTranslation by
following the response protocol. Section markers are mandatory and must
appear in order; everything inside a section is parsed tolerantly because
the reply is generated by a model and is only "mostly" well-formed.
"""

import logging
import re
from typing import Dict, List, Optional, Tuple, Union

from ..models.result import ParseFailure, ParsedTranslation, SynthesisPoint, TradeOffs
from ..protocol import CURRENT_PROTOCOL, ResponseProtocol
from code_translator.utils.text import normalize_for_display

logger = logging.getLogger(__name__)

# Horizontal rules: the protocol rule plus common markdown variants
_RULE_LINE = re.compile(r"^\s*[━─—=_*\-]{3,}\s*$")
_FENCE_OPEN = re.compile(r"^\s*(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
_PATTERN_NAME = re.compile(r"^(?P<name>[^:]+?):\s+(?P<rest>.*)$")
VARIATION_SELECTOR = "\ufe0f"
# Markdown that may surround a section header: headings, bold, quotes
_HEADER_DECORATION = re.compile(r"[\s#*_>]*")
_HEADER_LEFTOVER = re.compile(r"^[ \t*_:]+")

ParseOutcome = Union[ParsedTranslation, ParseFailure]


def _is_rule(line: str) -> bool:
    return bool(_RULE_LINE.match(line))


def _trim_at_rule(body: str) -> str:
    """Keep section content up to the first rule that follows it."""
    kept: List[str] = []
    for line in body.splitlines():
        if _is_rule(line):
            if any(k.strip() for k in kept):
                break
            continue
        kept.append(line)
    return "\n".join(kept).strip()


def _clean_name(text: str) -> str:
    return text.strip().strip("*[]").strip()


def _drop_header_prefix(body: str, emoji: str) -> str:
    """Remove the decoration that precedes the next marker on its line.

    A line such as ``## 💡 **KEY INSIGHT:`` leaves ``## 💡 **`` at the end of
    the previous section. When the marker shares its line with content, only
    the emoji is dropped.
    """
    decoration = emoji.replace(VARIATION_SELECTOR, "")
    line_start = body.rfind("\n") + 1
    prefix = body[line_start:].replace(VARIATION_SELECTOR, "")
    if decoration:
        prefix = prefix.replace(decoration, "")
    if _HEADER_DECORATION.fullmatch(prefix):
        return body[:line_start]

    stripped = body.rstrip().rstrip(VARIATION_SELECTOR)
    if decoration and stripped.endswith(decoration):
        return stripped[: -len(decoration)]
    return body


class ResponseParser:
    """Parses replies against the response protocol.

    Responsibilities:
    1. Locate the section markers in order, or report the first bad one
    2. Extract the first fenced code block of the code section
    3. Split synthesis points on bullet tokens
    4. Read the key insight and the labeled trade-offs
    """

    def __init__(self, protocol: ResponseProtocol = CURRENT_PROTOCOL):
        self.protocol = protocol
        self._label_patterns = {
            label: re.compile(
                rf"^[\s>*_\-]*{re.escape(label)}[\s*_]*:[\s*_]*(?P<value>.*?)[\s*]*$",
                re.IGNORECASE,
            )
            for label in protocol.tradeoff_labels
        }
        self._rationale = re.compile(
            rf"^[\s*_]*{re.escape(protocol.rationale_label.rstrip(':'))}[\s*_]*:[\s*_]*(?P<value>.*)$",
            re.IGNORECASE,
        )

    def parse(self, raw_text: str) -> ParseOutcome:
        """Parse a raw reply.

        Args:
            raw_text: Text of a successful completion

        Returns:
            ParsedTranslation, or ParseFailure if a marker is missing or misordered
        """
        located = self._locate_sections(raw_text)
        if isinstance(located, ParseFailure):
            logger.warning(
                f"Protocol violation: {located.diagnostic}; "
                f"reply preview: {normalize_for_display(raw_text, 200)!r}"
            )
            return located

        bodies = self._section_bodies(raw_text, located)
        warnings: List[str] = []

        translated_code = self._extract_code(bodies["translated_code"], warnings)
        synthesis_points = self._parse_synthesis_points(
            _trim_at_rule(bodies["synthesis_points"]), warnings
        )
        key_insight = _trim_at_rule(bodies["key_insight"])
        if not key_insight:
            warnings.append("Key insight section is empty")
        tradeoffs = self._parse_tradeoffs(_trim_at_rule(bodies["tradeoffs"]), warnings)

        for warning in warnings:
            logger.debug(f"Tolerated parse defect: {warning}")

        return ParsedTranslation(
            translated_code=translated_code,
            synthesis_points=synthesis_points,
            key_insight=key_insight,
            tradeoffs=tradeoffs,
            warnings=warnings,
            protocol_version=self.protocol.version,
            raw_text=raw_text,
        )

    def _locate_sections(
        self, raw_text: str
    ) -> Union[List[Tuple[int, int]], ParseFailure]:
        """Find (start, end) of every marker, in protocol order."""
        spans: List[Tuple[int, int]] = []
        cursor = 0
        for section in self.protocol.sections:
            index = raw_text.find(section.marker, cursor)
            if index < 0:
                out_of_order = section.marker in raw_text
                reason = "out_of_order" if out_of_order else "missing"
                if out_of_order:
                    diagnostic = f"Section marker '{section.marker}' is out of order"
                else:
                    diagnostic = f"Section marker '{section.marker}' is missing"
                return ParseFailure(
                    raw_text=raw_text,
                    diagnostic=diagnostic,
                    marker=section.marker,
                    reason=reason,
                    protocol_version=self.protocol.version,
                )
            spans.append((index, index + len(section.marker)))
            cursor = index + len(section.marker)
        return spans

    def _section_bodies(
        self, raw_text: str, spans: List[Tuple[int, int]]
    ) -> Dict[str, str]:
        sections = self.protocol.sections
        bodies: Dict[str, str] = {}
        for i, section in enumerate(sections):
            start = spans[i][1]
            end = spans[i + 1][0] if i + 1 < len(spans) else len(raw_text)
            # Bold or colon left over on the header line, e.g. "**KEY INSIGHT:**"
            body = _HEADER_LEFTOVER.sub("", raw_text[start:end])
            if i + 1 < len(sections):
                body = _drop_header_prefix(body, sections[i + 1].emoji)
            bodies[section.key] = body
        return bodies

    def _extract_code(self, body: str, warnings: List[str]) -> str:
        """Return the contents of the first fenced block in the code section."""
        # Drop the rest of the header line, e.g. " (Haskell):"
        _, _, body = body.partition("\n")
        lines = body.splitlines()

        for i, line in enumerate(lines):
            opening = _FENCE_OPEN.match(line)
            if not opening:
                continue
            fence = opening.group("fence")
            closing = re.compile(rf"^\s*{re.escape(fence[0])}{{{len(fence)},}}\s*$")
            content: List[str] = []
            for inner in lines[i + 1:]:
                if closing.match(inner):
                    return "\n".join(content)
                content.append(inner)
            warnings.append("Code block is not terminated")
            return _trim_trailing_rules("\n".join(content))

        warnings.append("Code section is not fenced")
        return _trim_at_rule(body)

    def _parse_synthesis_points(
        self, text: str, warnings: List[str]
    ) -> List[SynthesisPoint]:
        entries: List[List[str]] = []
        for line in text.splitlines():
            stripped = line.strip()
            bullet = next((b for b in self.protocol.bullets if stripped.startswith(b)), None)
            if bullet is not None:
                entries.append([stripped[len(bullet):].strip()])
            elif entries:
                entries[-1].append(stripped)

        points = []
        for number, entry in enumerate(entries, start=1):
            points.append(self._parse_point(number, entry, warnings))
        return points

    def _parse_point(
        self, number: int, lines: List[str], warnings: List[str]
    ) -> SynthesisPoint:
        header_parts: List[str] = []
        rationale_parts: List[str] = []
        in_rationale = False
        for line in lines:
            if not in_rationale:
                match = self._rationale.match(line)
                if match:
                    in_rationale = True
                    rationale_parts.append(match.group("value").strip())
                    continue
                header_parts.append(line)
            else:
                rationale_parts.append(line)

        header = " ".join(part for part in header_parts if part)
        rationale = " ".join(part for part in rationale_parts if part)
        if not in_rationale:
            warnings.append(f"Synthesis point {number} has no rationale")

        name, source_approach, target_approach = self._split_mapping(header)
        if not target_approach:
            warnings.append(f"Synthesis point {number} has no source/target mapping")

        return SynthesisPoint(
            pattern_name=name,
            source_approach=source_approach,
            target_approach=target_approach,
            rationale=rationale,
        )

    def _split_mapping(self, header: str) -> Tuple[str, str, str]:
        """Split ``Name: source approach → target approach``.

        Without a name the source side doubles as the pattern name.
        """
        arrow_at: Optional[Tuple[int, str]] = None
        for arrow in self.protocol.arrows:
            index = header.find(arrow)
            if index >= 0 and (arrow_at is None or index < arrow_at[0]):
                arrow_at = (index, arrow)

        if arrow_at is None:
            left, right = header, ""
        else:
            index, arrow = arrow_at
            left, right = header[:index], header[index + len(arrow):]

        named = _PATTERN_NAME.match(left.strip())
        if named:
            name = _clean_name(named.group("name"))
            source_approach = named.group("rest").strip()
        else:
            source_approach = left.strip()
            name = _clean_name(source_approach)
        return name, source_approach, right.strip()

    def _parse_tradeoffs(self, text: str, warnings: List[str]) -> TradeOffs:
        found: Dict[str, List[str]] = {}
        current: Optional[str] = None
        for line in text.splitlines():
            label = None
            for candidate, pattern in self._label_patterns.items():
                match = pattern.match(line)
                if match:
                    label = candidate
                    break
            if label is not None:
                if label in found:
                    # First occurrence wins
                    warnings.append(f"Trade-off label {label} appears more than once")
                    current = None
                else:
                    found[label] = [match.group("value").strip()]
                    current = label
            elif current is not None and line.strip():
                found[current].append(line.strip())

        values: Dict[str, str] = {}
        for label in self.protocol.tradeoff_labels:
            if label not in found:
                warnings.append(f"Trade-off label {label} is missing")
            values[label.lower()] = " ".join(p for p in found.get(label, []) if p)
        return TradeOffs(**values)


def _trim_trailing_rules(text: str) -> str:
    lines = text.splitlines()
    while lines and (not lines[-1].strip() or _is_rule(lines[-1])):
        lines.pop()
    return "\n".join(lines)
