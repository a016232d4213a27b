"""Career agent - routes queries to LLM agents and drives the career-positioning workflow."""

__version__ = "0.1.0"
