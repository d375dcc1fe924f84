"""Core translation logic."""
