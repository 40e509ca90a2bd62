"""Core Layer: pure report logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic ("today" is always passed in)

Design Decisions:
    - Functional core separated from imperative shell: services/ does the IO
      around these functions
"""
