"""Database Declarations — SQLAlchemy Base and the shared timestamp columns.

Invariants:
    - Every lifecycle table carries created_at / updated_at / deleted_at
    - No engine or session lives here (see infrastructure/database.py)

Design Decisions:
    - asyncpg driver for PostgreSQL (native async, no thread pool overhead)
"""
