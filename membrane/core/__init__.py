"""Core Layer — pure merge rules and domain types, no IO, no async.

Invariants:
    - No module in core/ imports from services/, schemas/, or infrastructure/
    - All functions are pure and deterministic; inputs are never mutated
"""
