"""Services Layer — lifecycle engines (application decision, settlement, invitation response).

Invariants:
    - Engines depend on store Protocols only, never on the ORM or a session
    - Every status write goes through a guarded (compare-and-swap) store call
"""
