"""Pydantic Schemas — validated configuration objects for pipeline descriptors.

Invariants:
    - Schemas validate at construction time, never per invocation
    - Domain types from core/ used for enum fields
"""
