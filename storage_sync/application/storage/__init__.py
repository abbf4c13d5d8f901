"""
Application layer for the storage bounded context.

Adapters turn transcoded server payloads into domain entities.
Services coordinate the transport and the adapters for one
fetch or mutation each.
"""
