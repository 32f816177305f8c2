"""Core Layer - pure domain logic, no IO, no DB, no FastAPI.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - All functions are pure and deterministic; only the Protocols declare async methods
"""
