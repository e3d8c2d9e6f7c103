"""Infrastructure — database session manager, SQL record stores, logging setup.

Invariants:
    - Only this layer imports SQLAlchemy sessions and ORM models for writes
    - Stores return core records (frozen dataclasses), never ORM instances
"""
