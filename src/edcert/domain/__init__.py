"""Domain layer: domain sets, certificate requests, artifact paths.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
