"""Domain layer — layout tree, paths, and pure mutations.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
