import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Tuple

from feedback_insights.exceptions import StorageError
from feedback_insights.submission import FeedbackRecord


@dataclass(frozen=True)
class Department:
    """A department feedback can be filed against."""

    id: str
    name: str
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"id": self.id, "name": self.name, "description": self.description}


class FeedbackStore(Protocol):
    """Persistence collaborator used by the submission and analytics paths."""

    def insert(self, record: FeedbackRecord) -> str:
        ...

    def list_page(self, offset: int, limit: int) -> Tuple[List[FeedbackRecord], int]:
        ...

    def list_all(self) -> List[FeedbackRecord]:
        ...

    def department_names(self) -> Dict[str, str]:
        ...

    def list_departments(self) -> List[Department]:
        ...


class InMemoryFeedbackStore:
    """A thread-safe, append-only store for feedback records kept in memory."""

    def __init__(
        self,
        departments: Optional[List[Department]] = None,
        max_records: Optional[int] = None,
    ):
        """Create a new :class:`InMemoryFeedbackStore`.

        Args:
            departments: Departments available for lookup by id.
            max_records: Optional capacity.  :pydata:`None` (default) means
                unlimited.
        """
        self._records: Dict[str, FeedbackRecord] = {}
        self._departments: Dict[str, Department] = {
            dept.id: dept for dept in (departments or [])
        }
        self._lock = threading.Lock()
        # None == unlimited
        self._max_records = max_records if (max_records or 0) > 0 else None
        self._logger = logging.getLogger(__name__)

    def insert(self, record: FeedbackRecord) -> str:
        """
        Appends a record and returns its id.
        Raises StorageError if the id already exists or the store is full.
        Records are never updated once written.
        """
        with self._lock:
            if (
                self._max_records is not None
                and len(self._records) >= self._max_records
            ):
                raise StorageError("Feedback store capacity reached.")

            if record.id in self._records:
                raise StorageError(f"Feedback with ID {record.id} already exists.")
            self._records[record.id] = record
        self._logger.debug("feedback_inserted", extra={"feedback_id": record.id})
        return record.id

    def get(self, record_id: str) -> Optional[FeedbackRecord]:
        """Retrieves a record by its ID. Returns None if not found."""
        with self._lock:
            return self._records.get(record_id)

    def _snapshot_newest_first(self) -> List[FeedbackRecord]:
        with self._lock:
            records = list(self._records.values())
        return sorted(records, key=lambda rec: rec.submitted_at, reverse=True)

    def list_page(self, offset: int, limit: int) -> Tuple[List[FeedbackRecord], int]:
        """Return one page of records (newest first) and the total count."""
        if offset < 0 or limit < 0:
            raise StorageError("offset and limit must be non-negative")
        records = self._snapshot_newest_first()
        return records[offset : offset + limit], len(records)

    def list_all(self) -> List[FeedbackRecord]:
        """Returns a copy of every stored record, newest first."""
        return self._snapshot_newest_first()

    def count(self) -> int:
        """Returns the total number of stored records."""
        with self._lock:
            return len(self._records)

    # ------------------------------------------------------------------
    # Department lookup
    # ------------------------------------------------------------------

    def add_department(self, department: Department) -> None:
        """Registers a department. Raises StorageError on duplicate ids."""
        with self._lock:
            if department.id in self._departments:
                raise StorageError(f"Department with ID {department.id} already exists.")
            self._departments[department.id] = department

    def department_names(self) -> Dict[str, str]:
        """Map department id → display name."""
        with self._lock:
            return {dept_id: dept.name for dept_id, dept in self._departments.items()}

    def list_departments(self) -> List[Department]:
        """Departments ordered by name."""
        with self._lock:
            departments = list(self._departments.values())
        return sorted(departments, key=lambda dept: dept.name)
