# apps/domain/ports/__init__.py
"""
Ports - Interface Definitions (Dependency Inversion)

Ports define contracts between domain and infrastructure layers.
Services depend on these protocols; repositories and the tagged cache
implement them.
"""
