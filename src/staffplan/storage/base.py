from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Generator, List, Optional, Sequence

from sqlalchemy.orm import Session

from staffplan.domain import (
    Activity,
    Assignment,
    AssignmentStatus,
    DateWindow,
    ProjectRequirement,
    TimeEntry,
    TimeEntryStatus,
    User,
)


class StorageAdapter(ABC):
    """Abstract base class for storage adapters."""

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to the storage backend."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the connection."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the backend is reachable."""
        pass

    @abstractmethod
    def get_session(self) -> Generator[Session, None, None]:
        """Provide a contextual session."""
        pass


@dataclass
class CandidateFilter:
    """
    Filter for the candidate query used by the recommender.

    window bounds may be None; a missing bound does not restrict that side.
    """
    window: DateWindow = field(default_factory=DateWindow)
    exclude_user_ids: Sequence[str] = ()
    assignment_statuses: Sequence[AssignmentStatus] = ()
    time_entry_statuses: Sequence[TimeEntryStatus] = ()


class RecordStore(ABC):
    """
    Read-only query contract the engine consumes.

    Implementations return point-in-time snapshots. The engine holds no
    store state between calls.
    """

    @abstractmethod
    def find_users_with_skills_roles_assignments(self, candidate_filter: CandidateFilter) -> List[User]:
        """Users with skills, current team role, matching assignments and time entries."""
        pass

    @abstractmethod
    def find_assignments_overlapping(
        self,
        user_id: str,
        window: DateWindow,
        statuses: Optional[Sequence[AssignmentStatus]] = None,
    ) -> List[Assignment]:
        pass

    @abstractmethod
    def find_time_entries_in_window(
        self,
        user_id: Optional[str],
        window: DateWindow,
        statuses: Optional[Sequence[TimeEntryStatus]] = None,
    ) -> List[TimeEntry]:
        """Time entries dated inside the window, for one user or everyone when user_id is None."""
        pass

    @abstractmethod
    def find_activity_by_id(self, activity_id: str) -> Optional[Activity]:
        pass

    @abstractmethod
    def find_project_requirements(self, activity_id: str) -> List[ProjectRequirement]:
        pass

    @abstractmethod
    def find_user_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    def list_users(self) -> List[User]:
        pass

    @abstractmethod
    def list_activities(self) -> List[Activity]:
        pass
