"""
Interfaces layer package.

Pydantic schemas for wire records and request bodies, plus the
composition root that wires the transport to the services.
"""
