"""
Domain layer package.

Contains pure business logic: entities, tag lookup tables, aggregate rules,
and port interfaces. No framework imports, no IO, no side effects.
"""
