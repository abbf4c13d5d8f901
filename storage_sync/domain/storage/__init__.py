"""
Storage bounded context: domain layer.

This module contains all domain logic for the storage context:
- Physical locations and their owned sublocations
- Digital locations (platforms and subscriptions)
- Game items and their single owner
- Aggregate counts derived from the normalized entity set
"""
