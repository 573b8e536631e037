"""chatrelay Routes Package.

- chat: streaming relay endpoints, one per provider
- health: Health check and monitoring endpoints
"""
from chatrelay.app.routes import chat, health

__all__ = ["chat", "health"]
