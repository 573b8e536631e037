"""chatrelay - streaming chat-completion relay for LLM providers."""

__version__ = "0.1.0"
