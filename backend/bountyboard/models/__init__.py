"""ORM Models — SQLAlchemy declarative models for the lifecycle records.

Invariants:
    - All models inherit from Base (db/base.py)
    - Status columns hold the str values of the domain enums

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from bountyboard.models.bounty import Bounty  # noqa: F401
from bountyboard.models.application import Application  # noqa: F401
from bountyboard.models.invitation import Invitation  # noqa: F401
