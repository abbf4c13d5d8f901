"""
Cache keys for the query-caching collaborator.

Keys are tuples so they are hashable and compare by value. A key that is a
prefix of another invalidates it, so ``PHYSICAL_ALL`` covers every detail
and sublocation key below it.
"""

QueryKey = tuple[str, ...]

PHYSICAL_ALL: QueryKey = ("physical-locations",)
DIGITAL_ALL: QueryKey = ("digital-locations",)
SUBLOCATIONS_ALL: QueryKey = ("sublocations",)
ANALYTICS: QueryKey = ("analytics",)


def physical_detail(location_id: str) -> QueryKey:
    return PHYSICAL_ALL + ("detail", location_id)


def physical_sublocations(parent_id: str) -> QueryKey:
    return physical_detail(parent_id) + ("sublocations",)


def sublocation_detail(sublocation_id: str) -> QueryKey:
    return SUBLOCATIONS_ALL + (sublocation_id,)


def digital_detail(location_id: str) -> QueryKey:
    return DIGITAL_ALL + ("detail", location_id)


def is_prefix(prefix: QueryKey, key: QueryKey) -> bool:
    """True when invalidating ``prefix`` also invalidates ``key``."""
    return key[: len(prefix)] == prefix
