"""Domain layer — ranges, schemas, and the normalization engine.

This layer depends only on stdlib and pydantic.
It must never import from services, config, commands, or output.
"""
