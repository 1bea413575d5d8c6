"""
Storage contract shared by the relational and in-memory backends.

Repositories work with plain dicts keyed by snake_case column names. Not-found
is reported by return value (None / False); StorageError is reserved for
operational failures such as an unreachable database.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Tuple, FrozenSet

from spartec.models import Customer, Material, WorkOrder, Invoice, Project


class StorageError(Exception):
    """Operational failure in a storage backend"""


@dataclass(frozen=True)
class EntityConfig:
    label: str  # used in log and error messages
    model: Any
    code_entity: Optional[str] = None
    code_field: Optional[str] = None
    search_fields: Tuple[str, ...] = ()
    clearable_fields: FrozenSet[str] = frozenset()
    defaults: Dict[str, Any] = field(default_factory=dict)
    list_fields: Tuple[str, ...] = ()

    @property
    def columns(self) -> List[str]:
        return [c.name for c in self.model.__table__.columns]

    @property
    def protected_fields(self) -> FrozenSet[str]:
        protected = {"id", "created_at"}
        if self.code_field:
            protected.add(self.code_field)
        return frozenset(protected)

    def prepare_draft(self, draft: Dict[str, Any]) -> Dict[str, Any]:
        """Known, client-controlled fields of `draft`; defaults fill absent keys, explicit None is kept"""
        columns = self.columns
        values = {
            key: value for key, value in draft.items()
            if key in columns and key not in self.protected_fields
        }
        for key, default in self.defaults.items():
            if key not in values:
                values[key] = list(default) if isinstance(default, list) else default
        return values

    def clean_changes(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Partial update fields that may be applied; never the code or id"""
        columns = self.columns
        cleaned = {}
        for key, value in changes.items():
            if key not in columns or key in self.protected_fields:
                continue
            if value is None and key not in self.clearable_fields:
                continue
            cleaned[key] = value
        return cleaned

    def normalize(self, record: Dict[str, Any]) -> Dict[str, Any]:
        for key in self.list_fields:
            if record.get(key) is None:
                record[key] = []
        return record


CUSTOMERS = EntityConfig(
    label="Customer",
    model=Customer,
    code_entity="customer",
    code_field="customer_number",
    search_fields=("customer_number", "name", "city", "email"),
    clearable_fields=frozenset({"email", "phone"}),
    defaults={"status": "Actief"},
)

MATERIALS = EntityConfig(
    label="Material",
    model=Material,
    code_entity="material",
    code_field="article_number",
    search_fields=("article_number", "name", "brand", "category", "supplier"),
    clearable_fields=frozenset({"brand", "stock", "min_stock", "supplier"}),
    defaults={"stock": 0, "min_stock": 0},
)

WORK_ORDERS = EntityConfig(
    label="Work order",
    model=WorkOrder,
    code_entity="workorder",
    code_field="order_number",
    search_fields=("order_number", "title", "description"),
    clearable_fields=frozenset({"description", "notes"}),
    defaults={"status": "Ingepland", "labor_hours": 0, "materials": [], "photos": []},
    list_fields=("materials", "photos"),
)

INVOICES = EntityConfig(
    label="Invoice",
    model=Invoice,
    code_entity="invoice",
    code_field="invoice_number",
    search_fields=("invoice_number",),
    clearable_fields=frozenset({"work_order_id"}),
    defaults={"status": "Concept", "items": []},
    list_fields=("items",),
)

PROJECTS = EntityConfig(
    label="Project",
    model=Project,
    search_fields=("title", "description"),
    clearable_fields=frozenset({"description", "end_date"}),
    defaults={"status": "Gepland", "progress": 0, "work_orders": []},
    list_fields=("work_orders",),
)


class Repository(ABC):
    """CRUD operations for one entity class"""

    config: EntityConfig

    @abstractmethod
    def get_all(self, status: Optional[str] = None, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """All records, newest (highest id) first"""

    @abstractmethod
    def get_by_id(self, record_id: int) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def create(self, draft: Dict[str, Any]) -> Dict[str, Any]:
        """Persist `draft`, assigning id, code and created_at"""

    @abstractmethod
    def update(self, record_id: int, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge `changes` into the record; None if it does not exist"""

    @abstractmethod
    def delete(self, record_id: int) -> bool:
        ...


class UserRepository(ABC):

    @abstractmethod
    def get_by_id(self, user_id: int) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        """Case-insensitive lookup"""

    @abstractmethod
    def get_all(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def create(self, draft: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    def set_password(self, user_id: int, password_hash: str) -> bool:
        ...


class Storage(ABC):
    """One repository per entity class, backed by the same store"""

    customers: Repository
    materials: Repository
    work_orders: Repository
    invoices: Repository
    projects: Repository
    users: UserRepository
