"""Form Builder: JSON-described forms, object storage persistence and LLM answer review."""

__version__ = "1.0.0"
