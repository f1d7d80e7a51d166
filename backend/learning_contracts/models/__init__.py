"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Contract is the aggregate root for clauses and amendments
    - Every foreign key restricts deletion except cohort_members (cascade)

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from learning_contracts.models.user import User  # noqa: F401
from learning_contracts.models.cohort import Cohort, cohort_members  # noqa: F401
from learning_contracts.models.contract import Contract  # noqa: F401
from learning_contracts.models.clause import Clause  # noqa: F401
from learning_contracts.models.amendment import Amendment  # noqa: F401
from learning_contracts.models.tension_measurement import TensionMeasurement  # noqa: F401
from learning_contracts.models.journal_entry import JournalEntry  # noqa: F401
from learning_contracts.models.failure_entry import FailureEntry  # noqa: F401
from learning_contracts.models.iteration import Iteration  # noqa: F401
