"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, infrastructure/, models/, or db/
    - All check functions are pure and deterministic (time is passed in, never read)

Design Decisions:
    - Functional core separated from imperative shell: engines load, core decides,
      stores write
"""
