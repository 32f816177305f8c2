"""Pydantic Schemas - request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (path and query parameters)
    - Schemas are API contracts; models/ is persistence
"""
