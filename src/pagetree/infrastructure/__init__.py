"""Infrastructure layer — database, project store, and persistence queue.

This layer depends on stdlib, pydantic models from the domain layer, and
third-party libs (SQLAlchemy). It must never import from services,
commands, or output.
"""
