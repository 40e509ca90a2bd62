"""Market Reports Package: cached earnings reporting over the Envato Market API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
