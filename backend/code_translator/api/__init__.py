"""HTTP boundary for the translation pipeline."""
