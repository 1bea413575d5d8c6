"""
In-memory storage backend.

Used for demos and tests. All repositories share one lock, so code allocation
and insert happen as a single step and no two records get the same code.
Records are copied on the way in and out; callers never hold stored state.
"""
import copy
import logging
import threading
from datetime import datetime
from typing import Optional, List, Dict, Any, Callable, Tuple

from spartec.models import User
from spartec.services import sequence
from spartec.storage.base import (
    Storage, Repository, UserRepository, EntityConfig,
    CUSTOMERS, MATERIALS, WORK_ORDERS, INVOICES, PROJECTS,
)

logger = logging.getLogger(__name__)


class MemoryRepository(Repository):

    def __init__(
        self,
        config: EntityConfig,
        lock: threading.RLock,
        counters: Dict[Tuple[str, str], int],
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config
        self._lock = lock
        self._counters = counters
        self._rows: Dict[int, Dict[str, Any]] = {}
        self._next_id = 1
        self.clock = clock or datetime.now

    def _matches(self, row: Dict[str, Any], status: Optional[str], search: Optional[str]) -> bool:
        if status and row.get("status") != status:
            return False
        if search:
            needle = search.lower()
            return any(
                needle in str(row.get(name) or "").lower()
                for name in self.config.search_fields
            )
        return True

    def get_all(self, status: Optional[str] = None, search: Optional[str] = None) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(self._rows[record_id])
                for record_id in sorted(self._rows, reverse=True)
                if self._matches(self._rows[record_id], status, search)
            ]

    def get_by_id(self, record_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._rows.get(record_id)
            return copy.deepcopy(row) if row else None

    def _scope_codes(self, prefix: str) -> List[str]:
        codes = (row.get(self.config.code_field) for row in self._rows.values())
        return [code for code in codes if code and code.startswith(prefix)]

    def _allocate_code(self) -> str:
        entity = self.config.code_entity
        fmt = sequence.get_format(entity)
        scope = sequence.current_scope(entity, self.clock)

        from_codes = sequence.seed_value(entity, scope, self._scope_codes(fmt.prefix(scope)))
        last = self._counters.get((entity, scope))
        value = from_codes if last is None else max(last + 1, from_codes)

        self._counters[(entity, scope)] = value
        return fmt.format(scope, value)

    def create(self, draft: Dict[str, Any]) -> Dict[str, Any]:
        values = copy.deepcopy(self.config.prepare_draft(draft))

        with self._lock:
            record = {name: None for name in self.config.columns}
            record.update(values)
            record["id"] = self._next_id
            record["created_at"] = self.clock()
            if self.config.code_field:
                record[self.config.code_field] = self._allocate_code()

            self._rows[record["id"]] = self.config.normalize(record)
            self._next_id += 1

            if self.config.code_field:
                logger.info(f"{self.config.label} {record[self.config.code_field]} created")
            else:
                logger.info(f"{self.config.label} {record['id']} created")
            return copy.deepcopy(record)

    def update(self, record_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        cleaned = copy.deepcopy(self.config.clean_changes(changes))

        with self._lock:
            row = self._rows.get(record_id)
            if row is None:
                return None
            row.update(cleaned)
            self.config.normalize(row)
            return copy.deepcopy(row)

    def delete(self, record_id: int) -> bool:
        with self._lock:
            return self._rows.pop(record_id, None) is not None


class MemoryUserRepository(UserRepository):

    def __init__(self, lock: threading.RLock, clock: Optional[Callable[[], datetime]] = None):
        self._lock = lock
        self._users: Dict[int, Dict[str, Any]] = {}
        self._next_id = 1
        self.clock = clock or datetime.now

    def get_by_id(self, user_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            user = self._users.get(user_id)
            return dict(user) if user else None

    def get_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            for user in self._users.values():
                if user["username"].lower() == username.lower():
                    return dict(user)
            return None

    def get_all(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(self._users[user_id]) for user_id in sorted(self._users)]

    def create(self, draft: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            if self.get_by_username(draft["username"]):
                raise ValueError(f"Username '{draft['username']}' already exists")

            user = {name: None for name in (c.name for c in User.__table__.columns)}
            user.update({
                "id": self._next_id,
                "username": draft["username"],
                "full_name": draft["full_name"],
                "email": draft.get("email"),
                "phone": draft.get("phone"),
                "password": draft["password"],
                "role": draft.get("role") or "monteur",
                "created_at": self.clock(),
            })
            self._users[user["id"]] = user
            self._next_id += 1
            logger.info(f"User {user['username']} created")
            return dict(user)

    def set_password(self, user_id: int, password_hash: str) -> bool:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return False
            user["password"] = password_hash
            return True


class MemoryStorage(Storage):
    """Process-local storage; contents are lost on restart"""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._lock = threading.RLock()
        self._counters: Dict[Tuple[str, str], int] = {}
        self.customers = MemoryRepository(CUSTOMERS, self._lock, self._counters, clock)
        self.materials = MemoryRepository(MATERIALS, self._lock, self._counters, clock)
        self.work_orders = MemoryRepository(WORK_ORDERS, self._lock, self._counters, clock)
        self.invoices = MemoryRepository(INVOICES, self._lock, self._counters, clock)
        self.projects = MemoryRepository(PROJECTS, self._lock, self._counters, clock)
        self.users = MemoryUserRepository(self._lock, clock)
