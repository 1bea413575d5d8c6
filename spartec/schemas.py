from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional, List, Literal


CustomerType = Literal["Particulier", "Zakelijk"]
CustomerStatus = Literal["Actief", "Inactief"]
WorkOrderStatus = Literal["Ingepland", "In uitvoering", "Voltooid", "Geannuleerd"]
InvoiceStatus = Literal["Concept", "Verzonden", "Betaald", "Te laat"]
ProjectStatus = Literal["Gepland", "In uitvoering", "Voltooid", "Gepauzeerd"]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire; both accepted on input"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============ Users / Auth ============

class UserLogin(CamelModel):
    username: str
    password: str


class UserInfo(CamelModel):
    id: int
    username: str
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: str


class Token(CamelModel):
    access_token: str
    token_type: str
    expires_in: int  # seconds
    user: Optional[UserInfo] = None


# ============ Customers ============

class CustomerBase(CamelModel):
    name: str = Field(..., min_length=1)
    type: CustomerType
    street: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    status: CustomerStatus = "Actief"


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[CustomerType] = None
    street: Optional[str] = Field(None, min_length=1)
    postal_code: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[CustomerStatus] = None


class Customer(CustomerBase):
    id: int
    customer_number: str
    created_at: datetime


# ============ Materials ============

class MaterialBase(CamelModel):
    name: str = Field(..., min_length=1)
    brand: Optional[str] = None
    category: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    stock: Optional[int] = Field(0, ge=0)
    min_stock: Optional[int] = Field(0, ge=0)
    supplier: Optional[str] = None


class MaterialCreate(MaterialBase):
    pass


class MaterialUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    brand: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    min_stock: Optional[int] = Field(None, ge=0)
    supplier: Optional[str] = None


class Material(MaterialBase):
    id: int
    article_number: str
    created_at: datetime


# ============ Work Orders ============

class WorkOrderMaterialLine(CamelModel):
    """Material used on a work order; name and price are a snapshot"""
    material_id: int = Field(..., validation_alias=AliasChoices("materialId", "material_id", "id"),
        serialization_alias="materialId",
    )
    name: Optional[str] = None
    quantity: float = Field(..., gt=0)
    price: Optional[float] = Field(None, ge=0)


class WorkOrderBase(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    customer_id: int = Field(..., ge=1)
    status: WorkOrderStatus = "Ingepland"
    labor_hours: Optional[float] = Field(0, ge=0)
    notes: Optional[str] = None


class WorkOrderCreate(WorkOrderBase):
    date: Optional[datetime] = None  # defaults to now
    materials: List[WorkOrderMaterialLine] = []


class WorkOrderUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    customer_id: Optional[int] = Field(None, ge=1)
    date: Optional[datetime] = None
    status: Optional[WorkOrderStatus] = None
    labor_hours: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    materials: Optional[List[WorkOrderMaterialLine]] = None


class WorkOrderStatusUpdate(CamelModel):
    status: Optional[WorkOrderStatus] = None


class WorkOrderComplete(CamelModel):
    notes: Optional[str] = None
    labor_hours: Optional[float] = Field(None, ge=0)
    photos: List[str] = []


class WorkOrder(WorkOrderBase):
    id: int
    order_number: str
    date: datetime
    materials: List[WorkOrderMaterialLine] = []
    photos: List[str] = []
    created_at: datetime


# ============ Invoices ============

class InvoiceItem(CamelModel):
    description: str
    quantity: float
    price: float


class InvoiceBase(CamelModel):
    customer_id: int = Field(..., ge=1)
    work_order_id: Optional[int] = None
    date: datetime
    due_date: datetime
    amount: float = Field(..., ge=0)
    status: InvoiceStatus = "Concept"


class InvoiceCreate(InvoiceBase):
    items: List[InvoiceItem] = []


class InvoiceUpdate(CamelModel):
    customer_id: Optional[int] = Field(None, ge=1)
    work_order_id: Optional[int] = None
    date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    amount: Optional[float] = Field(None, ge=0)
    status: Optional[InvoiceStatus] = None
    items: Optional[List[InvoiceItem]] = None


class Invoice(InvoiceBase):
    id: int
    invoice_number: str
    items: List[InvoiceItem] = []
    created_at: datetime


# ============ Projects ============

class ProjectBase(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    customer_id: int = Field(..., ge=1)
    start_date: datetime
    end_date: Optional[datetime] = None
    progress: Optional[int] = Field(0, ge=0, le=100)
    status: ProjectStatus = "Gepland"


class ProjectCreate(ProjectBase):
    work_orders: List[int] = []


class ProjectUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    customer_id: Optional[int] = Field(None, ge=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    status: Optional[ProjectStatus] = None
    work_orders: Optional[List[int]] = None


class Project(ProjectBase):
    id: int
    work_orders: List[int] = []
    created_at: datetime


# ============ Dashboard ============

class WorkOrderStatusCounts(CamelModel):
    ingepland: int = 0
    in_uitvoering: int = 0
    voltooid: int = 0
    geannuleerd: int = 0


class InvoiceStatusCounts(CamelModel):
    concept: int = 0
    verzonden: int = 0
    betaald: int = 0
    te_laat: int = 0


class MonthlyRevenue(CamelModel):
    month: str
    amount: float


class DashboardStats(CamelModel):
    total_work_orders: int
    total_customers: int
    total_materials: int
    total_invoices: int
    work_orders_by_status: WorkOrderStatusCounts
    invoices_by_status: InvoiceStatusCounts
    recent_invoices: List[Invoice]
    low_stock_materials: List[Material]
    monthly_revenue: List[MonthlyRevenue]
