"""Domain layer — note model, parsing rules, and scheduling.

This layer depends only on stdlib, pydantic, and ruamel.yaml.
It must never import from services, infrastructure, commands, or config.
"""
