"""Service layer — request pipelines returning ServiceResult.

Services may import from domain and infrastructure layers.
They must never import from api or commands.
"""
