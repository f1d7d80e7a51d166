"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - CohortId, ContractId, ClauseId, AmendmentId, UserId wrap UUIDs
    - TensionValue is bounded 1–10
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: stored as-is in String columns and serialized to JSON without encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
CohortId = NewType("CohortId", UUID)
ContractId = NewType("ContractId", UUID)
ClauseId = NewType("ClauseId", UUID)
AmendmentId = NewType("AmendmentId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

TensionValue = NewType("TensionValue", int)   # 1–10

TENSION_MIN = 1
TENSION_MAX = 10


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Participant roles — maps to DB `users.role` column."""
    PARTICIPANT = "PARTICIPANT"
    FACILITATOR = "FACILITATOR"
    ADMIN = "ADMIN"


class AmendmentStatus(str, Enum):
    """Amendment lifecycle states — maps to DB `amendments.status` column."""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class AmendmentDecision(str, Enum):
    """Verdicts a decider can hand down on a PENDING amendment."""
    ACCEPT = "ACCEPT"
    REJECT = "REJECT"
