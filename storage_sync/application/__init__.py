"""
Application layer package.

Contains the domain adapters that normalize server payloads and the
services the query cache calls as fetchers and mutators.
Adapters depend only on the domain and the wire schemas.
"""
