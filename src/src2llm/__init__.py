"""src2llm: bundle source trees into a single LLM-friendly document."""

__version__ = "1.0.0"
