"""
Domain layer - Recipe records, response schemas, and payload mappers.
"""

from domain import mappers, schemas

__all__ = ["mappers", "schemas"]
