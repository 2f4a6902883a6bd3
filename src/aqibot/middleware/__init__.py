"""
Slack signature middleware for ASGI frameworks.

Re-exports the middleware class for convenient imports:
    from aqibot.middleware import SlackSignatureMiddleware
"""

from .asgi import SlackSignatureMiddleware

__all__ = ["SlackSignatureMiddleware"]
