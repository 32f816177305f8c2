"""Infrastructure Layer - database access, repository implementations, logging.

Invariants:
    - Implements core protocols; core never imports from here
    - Storage exceptions are mapped to DatabaseError or Rejected before leaving
"""
