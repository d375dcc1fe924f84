"""
Pytest configuration and fixtures
"""
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from code_translator.core.translation import CompletionFailure, CompletionSuccess

RULE = "━" * 35

WELL_FORMED_REPLY = f"""✨ TRANSLATED CODE (Haskell):

```haskell
data X = X
  deriving (Show, Eq)
```

{RULE}

🧠 SYNTHESIS POINTS:

✓ Class declaration: JavaScript class → Haskell data type
Rationale: Both introduce a nominal type with no fields.

✓ State management: JavaScript mutable fields → Haskell State monad
Rationale: Mutation becomes explicit state threading,
so every update is visible in the type.

{RULE}

💡 KEY INSIGHT:

An empty class is just a named type. Haskell separates data from behavior, so the translation only needs a type declaration.

{RULE}

⚖️ TRADE-OFFS:

GAINED: Immutability and structural equality for free.
LOST: Ad-hoc method attachment.
MITIGATION: Use type classes to attach behavior.

{RULE}
"""

CREDENTIAL = "sk-ant-test-credential-123"


@pytest.fixture
def well_formed_reply() -> str:
    return WELL_FORMED_REPLY


@pytest.fixture
def valid_record() -> Dict[str, Any]:
    return {
        "credential": CREDENTIAL,
        "sourceLanguage": "JavaScript",
        "targetLanguage": "Haskell",
        "sourceCode": "class X {}",
    }


def fake_model_response(text: str) -> SimpleNamespace:
    """Mimic the shape of a LiteLLM ModelResponse."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))],
        usage=SimpleNamespace(prompt_tokens=120, completion_tokens=80, total_tokens=200),
    )


class ScriptedClient:
    """Completion client double that replays scripted outcomes."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls: List[Dict[str, Any]] = []
        self.model = "fake-model"
        self.provider = "fake"

    async def complete(self, prompt, credential):
        self.calls.append({"prompt": prompt, "credential": credential})
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def success(text: str) -> CompletionSuccess:
    return CompletionSuccess(raw_text=text, model="fake-model")


def failure(status_code: int, message: str) -> CompletionFailure:
    return CompletionFailure(status_code=status_code, message=message)
