"""AIFlow relay backend: LLM-backed text workflows and book chat."""

__version__ = "0.1.0"
