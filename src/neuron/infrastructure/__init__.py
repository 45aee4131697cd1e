"""Infrastructure layer — SQLite store, filesystem discovery, question provider.

This layer depends on stdlib and third-party libs (SQLAlchemy, requests).
It may import domain models and errors, never services, commands, or output.
"""
