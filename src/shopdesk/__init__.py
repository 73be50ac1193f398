"""
shopdesk

Multi-tenant business-management backend: tenant resolution and role-based
authorization core plus its HTTP surface.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
