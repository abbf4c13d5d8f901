"""
Storage Sync: client-side data-synchronization layer for the media storage dashboard.

Package root. Sits between the dashboard UI and the storage backend and uses
hexagonal architecture (ports & adapters).

Bounded contexts:
    - storage: Physical locations, sublocations, digital locations, game items.

Layers:
    - domain: Entities, tag tables, aggregate rules, ports (ABCs), errors.
    - application: Domain adapters, services (fetchers/mutators), DTOs, query keys.
    - infrastructure: HTTP transport, case transcoding, envelope checks, telemetry sinks.
    - interfaces: Pydantic wire schemas and the composition root.
    - shared: Cross-cutting concerns (logging, error classification).
"""

__version__ = "0.1.0"
