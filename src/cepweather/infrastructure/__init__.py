"""Infrastructure layer — outbound HTTP clients for the directory, weather, and resolver APIs.

This layer depends on stdlib and third-party libs (httpx) plus domain types.
It must never import from services, api, or commands.
The service layer bridges between domain models and infrastructure.
"""
