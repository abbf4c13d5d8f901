"""
Wire record schemas for the storage bounded context.
"""
