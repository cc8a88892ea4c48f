"""
Service Layer - Business rules

Services take a SQLAlchemy session in their constructor, raise the
exceptions from storefront.core.errors, and own transaction boundaries.
"""
