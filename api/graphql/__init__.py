"""
GraphQL API Package
===================
Strawberry GraphQL implementation of the social graph.
"""

from .schema import schema

__all__ = ["schema"]
