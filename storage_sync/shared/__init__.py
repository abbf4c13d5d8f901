"""
Shared cross-cutting concerns.

Logging setup and error classification used by every layer.
"""
