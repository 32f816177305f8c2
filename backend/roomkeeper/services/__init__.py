"""Services Layer - async orchestration of core logic over boundary protocols.

Invariants:
    - Services depend on core Protocols, never on ORM models or FastAPI
    - Expected outcomes are returned as Success/Failure values
"""
