"""Prompt composer for code translation.

This module builds the single-turn instruction sent to the completion
service. Composition is a pure function of the request: no I/O, no
randomness, and the credential is never read.
"""

import re

from ..models.prompt import ComposedPrompt
from ..models.request import TranslationRequest
from ..protocol import CURRENT_PROTOCOL, ResponseProtocol, fence_label

# Any run of three or more backticks could close a fence of that length
_BACKTICK_RUN = re.compile(r"`{3,}")

MIN_FENCE_LENGTH = 3


def choose_fence(source_code: str) -> str:
    """Return a backtick fence longer than any backtick run in the code.

    Markdown closes a fence with a run at least as long as the opening one,
    so the fence must be strictly longer than every run already present.
    """
    longest = max((len(m.group(0)) for m in _BACKTICK_RUN.finditer(source_code)), default=0)
    return "`" * max(MIN_FENCE_LENGTH, longest + 1)


class PromptComposer:
    """Builds the "Cultural Grammar Synthesis" translation prompt.

    The prompt walks the model through four steps (invariants, source
    grammar, target grammar, idiomatic code) and then embeds the literal
    reply template from the response protocol, followed by the fenced
    source code.
    """

    def __init__(self, protocol: ResponseProtocol = CURRENT_PROTOCOL):
        self.protocol = protocol

    def compose(self, request: TranslationRequest) -> ComposedPrompt:
        """Compose the prompt for a validated request.

        Args:
            request: Validated translation request

        Returns:
            ComposedPrompt with the text and the fence that was chosen
        """
        source = request.source_language
        target = request.target_language
        fence = choose_fence(request.source_code)
        code = request.source_code
        if not code.endswith("\n"):
            code += "\n"

        template = self.protocol.render_template(source, target)

        text = f"""You are a universal code translator using "Cultural Grammar Synthesis" methodology.

Translate this {source} code to idiomatic {target} code.

CRITICAL INSTRUCTIONS:

1. IDENTIFY STRUCTURAL INVARIANTS (what MUST be preserved):
- State management patterns
- Effect handling patterns
- Composition patterns
- Control flow semantics
- Error handling semantics

2. EXTRACT SOURCE GRAMMAR:
- How does {source} organize these invariants?
- What paradigm patterns does it use?
- What are the idioms?

3. SYNTHESIZE TARGET GRAMMAR:
- How does {target} idiomatically express the same invariants?
- What are the native patterns?
- Translate paradigm, not just syntax

4. PRODUCE IDIOMATIC CODE:
- Must feel native to {target}
- Must preserve all semantic behavior
- Must be genuinely usable

Format your response EXACTLY like this:

{template}

Source code to translate:

{fence}{fence_label(source)}
{code}{fence}

Make the {target} code genuinely idiomatic and production-quality."""

        return ComposedPrompt(
            text=text,
            fence=fence,
            protocol_version=self.protocol.version,
            estimated_input_tokens=len(text) // 3,
        )
