"""Services Layer: report builders that orchestrate cache, upstream API and core.

Invariants:
    - Collaborators (API client, cache store) are injected, never imported as globals
"""
