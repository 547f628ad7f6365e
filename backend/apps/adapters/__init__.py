# apps/adapters/__init__.py
"""
Adapters - Infrastructure Implementations

Adapters implement the port interfaces defined in the domain layer:
Django ORM repositories for production and in-memory ones for tests.
"""

__version__ = "1.0.0"
