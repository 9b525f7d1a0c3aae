"""Infrastructure layer (LLM provider clients)."""
