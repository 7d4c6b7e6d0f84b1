"""Domain layer — types, rules, and conversions.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, api, commands, or config.
"""
