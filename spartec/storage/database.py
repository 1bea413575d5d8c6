"""
SQLAlchemy storage backend.

Code allocation runs inside the creating transaction: the `code_sequences` row
for (entity, scope) is locked with SELECT ... FOR UPDATE, bumped, and the new
record is inserted before commit. The counter never falls behind the highest
well-formed code already stored in the scope, so existing data keeps its
numbering and malformed codes are skipped. Code columns are unique, so a
collision that slips through (two transactions seeding the same counter row)
is retried a few times before giving up.
"""
import copy
import logging
from datetime import datetime
from typing import Optional, List, Dict, Any, Callable

from sqlalchemy import or_, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from spartec.config import settings
from spartec.models import CodeSequence, User
from spartec.services import sequence
from spartec.storage.base import (
    Storage, Repository, UserRepository, StorageError, EntityConfig,
    CUSTOMERS, MATERIALS, WORK_ORDERS, INVOICES, PROJECTS,
)

logger = logging.getLogger(__name__)


def row_to_dict(row) -> Dict[str, Any]:
    # JSON columns are mutable; callers must not reach the session state
    return {c.name: copy.deepcopy(getattr(row, c.name)) for c in row.__table__.columns}


class SqlRepository(Repository):

    def __init__(self, db: Session, config: EntityConfig, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.config = config
        self.model = config.model
        self.clock = clock or datetime.now

    def _to_dict(self, row) -> Dict[str, Any]:
        return self.config.normalize(row_to_dict(row))

    def _fail(self, action: str, error: Exception):
        self.db.rollback()
        logger.error(f"Error {action} {self.config.label.lower()}: {str(error)}")
        raise StorageError(f"Error {action} {self.config.label.lower()}") from error

    def get_all(self, status: Optional[str] = None, search: Optional[str] = None) -> List[Dict[str, Any]]:
        try:
            query = self.db.query(self.model)

            if status:
                query = query.filter(self.model.status == status)

            if search and self.config.search_fields:
                search_term = f"%{search}%"
                query = query.filter(or_(*[
                    getattr(self.model, name).ilike(search_term)
                    for name in self.config.search_fields
                ]))

            return [self._to_dict(row) for row in query.order_by(self.model.id.desc()).all()]
        except SQLAlchemyError as e:
            self._fail("fetching", e)

    def get_by_id(self, record_id: int) -> Optional[Dict[str, Any]]:
        try:
            row = self.db.query(self.model).filter(self.model.id == record_id).first()
            return self._to_dict(row) if row else None
        except SQLAlchemyError as e:
            self._fail("fetching", e)

    def _scope_codes(self, prefix: str) -> List[str]:
        code_column = getattr(self.model, self.config.code_field)
        rows = self.db.query(code_column).filter(code_column.like(f"{prefix}%")).all()
        return [row[0] for row in rows]

    def _allocate_code(self) -> str:
        """Next code for this entity; must run in the transaction that inserts it"""
        entity = self.config.code_entity
        fmt = sequence.get_format(entity)
        scope = sequence.current_scope(entity, self.clock)

        counter = self.db.query(CodeSequence).filter(
            CodeSequence.entity == entity,
            CodeSequence.scope == scope
        ).with_for_update().first()

        from_codes = sequence.seed_value(entity, scope, self._scope_codes(fmt.prefix(scope)))

        if counter is None:
            counter = CodeSequence(entity=entity, scope=scope, last_value=from_codes)
            self.db.add(counter)
        else:
            counter.last_value = max(counter.last_value + 1, from_codes)

        self.db.flush()
        return fmt.format(scope, counter.last_value)

    def create(self, draft: Dict[str, Any]) -> Dict[str, Any]:
        values = self.config.prepare_draft(draft)
        attempts = max(1, settings.code_allocation_retries) if self.config.code_field else 1
        last_error = None

        for attempt in range(1, attempts + 1):
            try:
                row = self.model(**values, created_at=self.clock())
                if self.config.code_field:
                    setattr(row, self.config.code_field, self._allocate_code())

                self.db.add(row)
                self.db.commit()
                self.db.refresh(row)

                if self.config.code_field:
                    logger.info(f"{self.config.label} {getattr(row, self.config.code_field)} created")
                else:
                    logger.info(f"{self.config.label} {row.id} created")
                return self._to_dict(row)

            except IntegrityError as e:
                self.db.rollback()
                last_error = e
                logger.warning(
                    f"Integrity error creating {self.config.label.lower()} "
                    f"(attempt {attempt}/{attempts}): {str(e)}"
                )
            except SQLAlchemyError as e:
                self._fail("creating", e)

        self._fail("creating", last_error)

    def update(self, record_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            row = self.db.query(self.model).filter(self.model.id == record_id).first()
            if not row:
                return None

            for key, value in self.config.clean_changes(changes).items():
                setattr(row, key, value)

            self.db.commit()
            self.db.refresh(row)
            return self._to_dict(row)
        except SQLAlchemyError as e:
            self._fail("updating", e)

    def delete(self, record_id: int) -> bool:
        try:
            row = self.db.query(self.model).filter(self.model.id == record_id).first()
            if not row:
                return False

            self.db.delete(row)
            self.db.commit()
            return True
        except SQLAlchemyError as e:
            self._fail("deleting", e)


class SqlUserRepository(UserRepository):

    def __init__(self, db: Session, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.clock = clock or datetime.now

    def _fail(self, action: str, error: Exception):
        self.db.rollback()
        logger.error(f"Error {action} user: {str(error)}")
        raise StorageError(f"Error {action} user") from error

    def get_by_id(self, user_id: int) -> Optional[Dict[str, Any]]:
        try:
            user = self.db.query(User).filter(User.id == user_id).first()
            return row_to_dict(user) if user else None
        except SQLAlchemyError as e:
            self._fail("fetching", e)

    def get_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        try:
            user = self.db.query(User).filter(
                func.lower(User.username) == username.lower()
            ).first()
            return row_to_dict(user) if user else None
        except SQLAlchemyError as e:
            self._fail("fetching", e)

    def get_all(self) -> List[Dict[str, Any]]:
        try:
            return [row_to_dict(user) for user in self.db.query(User).order_by(User.id).all()]
        except SQLAlchemyError as e:
            self._fail("fetching", e)

    def create(self, draft: Dict[str, Any]) -> Dict[str, Any]:
        try:
            if self.get_by_username(draft["username"]):
                raise ValueError(f"Username '{draft['username']}' already exists")

            user = User(
                username=draft["username"],
                full_name=draft["full_name"],
                email=draft.get("email"),
                phone=draft.get("phone"),
                password=draft["password"],
                role=draft.get("role") or "monteur",
                created_at=self.clock(),
            )
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            logger.info(f"User {user.username} created")
            return row_to_dict(user)
        except IntegrityError:
            self.db.rollback()
            raise ValueError(f"Username '{draft['username']}' already exists")
        except SQLAlchemyError as e:
            self._fail("creating", e)

    def set_password(self, user_id: int, password_hash: str) -> bool:
        try:
            user = self.db.query(User).filter(User.id == user_id).first()
            if not user:
                return False
            user.password = password_hash
            self.db.commit()
            return True
        except SQLAlchemyError as e:
            self._fail("updating", e)


class DatabaseStorage(Storage):
    """All repositories sharing one SQLAlchemy session"""

    def __init__(self, db: Session, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.customers = SqlRepository(db, CUSTOMERS, clock)
        self.materials = SqlRepository(db, MATERIALS, clock)
        self.work_orders = SqlRepository(db, WORK_ORDERS, clock)
        self.invoices = SqlRepository(db, INVOICES, clock)
        self.projects = SqlRepository(db, PROJECTS, clock)
        self.users = SqlUserRepository(db, clock)
