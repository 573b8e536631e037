"""Provider adapters for upstream chat-completion APIs."""
