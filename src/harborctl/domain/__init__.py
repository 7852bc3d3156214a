"""Domain layer — layer grammar, dispatch outcomes, tunnel sessions.

This layer depends only on the stdlib.
It must never import from services, infrastructure, commands, or config.
"""
