"""Services Layer — async transformers, pipeline orchestrators, and factories.

Invariants:
    - Every await on a user callback happens here; core/ stays synchronous
    - Transformers hold only their callback and strategy — no per-call state

Design Decisions:
    - One file per data-shape family for locality
"""
