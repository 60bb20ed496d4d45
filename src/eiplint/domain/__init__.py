"""Domain layer — preamble parsing and diagnostic records.

This layer depends only on stdlib and pydantic.
It must never import from lints, services, infrastructure, commands, or config.
"""
