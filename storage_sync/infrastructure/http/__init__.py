"""
HTTP transport for the storage backend.

Wire concerns live here: key casing, the response envelope,
bearer credentials and the retry-once-on-401 protocol.
"""
