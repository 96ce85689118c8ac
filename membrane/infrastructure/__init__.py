"""Infrastructure Layer — cross-cutting concerns (structured logging).

Invariants:
    - Nothing here runs on import; callers opt in explicitly
"""
