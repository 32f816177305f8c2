"""Roomkeeper Application Package - room participant management API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
