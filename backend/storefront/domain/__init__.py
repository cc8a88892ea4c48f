"""
Domain Layer - Request and response models

Pydantic models validating API input and shaping API output.
"""
