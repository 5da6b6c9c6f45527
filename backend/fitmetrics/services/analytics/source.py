"""
Record Source - boundary to the external document store.

The source does all owner, status and date-range filtering and hands the
calculator complete batches of raw records. The calculator never filters
on its own; it trusts the batches it is given.
"""
import copy
import json
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from fitmetrics.core.logging import get_logger
from fitmetrics.services.analytics.adapter import parse_instant

logger = get_logger(__name__)

Record = Dict[str, Any]

COLLECTIONS = (
    "users",
    "workouts",
    "groupWorkouts",
    "groups",
    "goals",
    "agent_activity",
)


class RecordSource(ABC):
    """Abstract interface for the document store holding raw records."""

    @abstractmethod
    async def find_user(self, username: str) -> Optional[Record]:
        """Find a user by username (case-insensitive)."""
        pass

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[Record]:
        """Get a user by ID."""
        pass

    @abstractmethod
    async def personal_workouts(
        self,
        user_id: str,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
        newest_first: bool = True,
    ) -> List[Record]:
        """Completed personal workouts owned by the user."""
        pass

    @abstractmethod
    async def group_workouts(
        self,
        user_id: str,
        since: Optional[datetime] = None,
        newest_first: bool = True,
    ) -> List[Record]:
        """Completed group workouts assigned to the user."""
        pass

    @abstractmethod
    async def group_assignments(self, user_id: str, group_id: str) -> List[Record]:
        """Every group workout assigned to the user in a group, any status."""
        pass

    @abstractmethod
    async def groups_for_member(self, user_id: str) -> List[Record]:
        """Groups the user belongs to."""
        pass

    @abstractmethod
    async def groups_for_admin(self, user_id: str) -> List[Record]:
        """Groups the user administers."""
        pass

    @abstractmethod
    async def goals(self, user_id: str, include_completed: bool = False) -> List[Record]:
        """The user's goals; only active ones unless include_completed."""
        pass

    @abstractmethod
    async def activity(
        self,
        since: Optional[datetime] = None,
        source: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Record]:
        """AI activity entries, newest first."""
        pass

    @abstractmethod
    async def add_activity(self, record: Record) -> str:
        """Store an AI activity entry and return its ID."""
        pass


class InMemoryRecordSource(RecordSource):
    """
    Record source backed by in-memory collections.

    Used for fixtures, tests and local development. Collections follow the
    stored document shapes (users, workouts, groupWorkouts, groups, goals,
    agent_activity).

    Usage:
        source = InMemoryRecordSource.from_json("fixtures.json")
        user = await source.find_user("alice")
    """

    def __init__(self, collections: Optional[Dict[str, Iterable[Record]]] = None):
        collections = collections or {}
        unknown = set(collections) - set(COLLECTIONS)
        if unknown:
            raise ValueError(f"Unknown collections: {sorted(unknown)}")

        self._collections: Dict[str, List[Record]] = {
            name: [copy.deepcopy(r) for r in collections.get(name, ())]
            for name in COLLECTIONS
        }

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "InMemoryRecordSource":
        """Load collections from a JSON file keyed by collection name."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        logger.info(
            "Loaded record fixture",
            path=str(path),
            counts={name: len(records) for name, records in data.items()},
        )
        return cls(data)

    # ========================================
    # Helpers
    # ========================================

    def _where(self, collection: str, **conditions: Any) -> List[Record]:
        return [
            dict(record)
            for record in self._collections[collection]
            if all(record.get(k) == v for k, v in conditions.items())
        ]

    @staticmethod
    def _since(records: List[Record], field: str, since: Optional[datetime]) -> List[Record]:
        if since is None:
            return records
        kept = []
        for record in records:
            instant = parse_instant(record.get(field))
            if instant is not None and instant >= since:
                kept.append(record)
        return kept

    @staticmethod
    def _order(records: List[Record], field: str, newest_first: bool) -> List[Record]:
        # Undated records sort after dated ones in either direction
        dated = [r for r in records if parse_instant(r.get(field)) is not None]
        undated = [r for r in records if parse_instant(r.get(field)) is None]
        dated.sort(key=lambda r: parse_instant(r.get(field)), reverse=newest_first)
        return dated + undated

    # ========================================
    # Reads
    # ========================================

    async def find_user(self, username: str) -> Optional[Record]:
        wanted = username.lower()
        for user in self._collections["users"]:
            if str(user.get("username", "")).lower() == wanted:
                return dict(user)
        return None

    async def get_user(self, user_id: str) -> Optional[Record]:
        matches = self._where("users", id=user_id)
        return matches[0] if matches else None

    async def personal_workouts(
        self,
        user_id: str,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
        newest_first: bool = True,
    ) -> List[Record]:
        records = self._where("workouts", userId=user_id, status="completed")
        records = self._order(self._since(records, "date", since), "date", newest_first)
        return records[:limit] if limit is not None else records

    async def group_workouts(
        self,
        user_id: str,
        since: Optional[datetime] = None,
        newest_first: bool = True,
    ) -> List[Record]:
        records = self._where("groupWorkouts", assignedTo=user_id, status="completed")
        return self._order(self._since(records, "date", since), "date", newest_first)

    async def group_assignments(self, user_id: str, group_id: str) -> List[Record]:
        return self._where("groupWorkouts", assignedTo=user_id, groupId=group_id)

    async def groups_for_member(self, user_id: str) -> List[Record]:
        return [
            dict(group)
            for group in self._collections["groups"]
            if user_id in (group.get("members") or ())
        ]

    async def groups_for_admin(self, user_id: str) -> List[Record]:
        return [
            dict(group)
            for group in self._collections["groups"]
            if user_id in (group.get("admins") or ())
        ]

    async def goals(self, user_id: str, include_completed: bool = False) -> List[Record]:
        if include_completed:
            return self._where("goals", userId=user_id)
        return self._where("goals", userId=user_id, status="active")

    async def activity(
        self,
        since: Optional[datetime] = None,
        source: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Record]:
        if source:
            records = self._where("agent_activity", source=source)
        else:
            records = self._where("agent_activity")
        records = self._order(self._since(records, "timestamp", since), "timestamp", True)
        return records[:limit] if limit is not None else records

    # ========================================
    # Writes
    # ========================================

    async def add_activity(self, record: Record) -> str:
        stored = copy.deepcopy(record)
        stored["id"] = uuid.uuid4().hex
        stored.setdefault("timestamp", datetime.now(timezone.utc))
        self._collections["agent_activity"].append(stored)

        logger.debug("Stored activity entry", activity_id=stored["id"], source=stored.get("source"))

        return stored["id"]
