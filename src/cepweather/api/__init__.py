"""HTTP layer — FastAPI application factories for the gateway and resolver.

The API layer may import from services, domain, and infrastructure.
Nothing below it imports from here.
"""
