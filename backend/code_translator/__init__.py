"""Code translation service: LLM-backed, protocol-checked source translation."""

__version__ = "0.1.0"
