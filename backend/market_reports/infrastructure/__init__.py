"""Infrastructure Layer: external service clients, cache stores and cross-cutting concerns.

Invariants:
    - All external calls wrapped with retry/timeout/error mapping
    - Failures surface as typed ReportsError subclasses (core/errors.py)
"""
