from sqlalchemy import Column, Integer, String, DateTime, Text, Float, JSON, UniqueConstraint
from sqlalchemy.sql import func
from spartec.database import Base


class User(Base):
    """Application user (monteur or beheerder)"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    password = Column(String, nullable=False)  # bcrypt hash
    role = Column(String, nullable=False, default="monteur")  # monteur, beheerder
    phone = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=func.now())


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    customer_number = Column(String, unique=True, nullable=False, index=True)  # KL-2025-0001
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)  # Particulier, Zakelijk
    street = Column(String, nullable=False)
    postal_code = Column(String, nullable=False)
    city = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    status = Column(String, nullable=False, default="Actief")  # Actief, Inactief
    created_at = Column(DateTime, nullable=False, default=func.now())


class Material(Base):
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    article_number = Column(String, unique=True, nullable=False, index=True)  # ART-000001
    name = Column(String, nullable=False)
    brand = Column(String, nullable=True)
    category = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=True, default=0)
    min_stock = Column(Integer, nullable=True, default=0)
    supplier = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=func.now())


class WorkOrder(Base):
    """Field service ticket (werkbon)"""
    __tablename__ = "work_orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, unique=True, nullable=False, index=True)  # WB-2025-0001
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    customer_id = Column(Integer, nullable=False, index=True)  # no FK, deletes do not cascade
    date = Column(DateTime, nullable=False)
    status = Column(String, nullable=False, default="Ingepland")
    labor_hours = Column(Float, nullable=True, default=0)
    notes = Column(Text, nullable=True)
    materials = Column(JSON, nullable=True)  # [{material_id, name, quantity, price}]
    photos = Column(JSON, nullable=True)  # base64 strings
    created_at = Column(DateTime, nullable=False, default=func.now())


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String, unique=True, nullable=False, index=True)  # F-2025-0001
    customer_id = Column(Integer, nullable=False, index=True)
    work_order_id = Column(Integer, nullable=True)
    date = Column(DateTime, nullable=False)
    due_date = Column(DateTime, nullable=False)
    amount = Column(Float, nullable=False)
    status = Column(String, nullable=False, default="Concept")  # Concept, Verzonden, Betaald, Te laat
    items = Column(JSON, nullable=True)  # [{description, quantity, price}]
    created_at = Column(DateTime, nullable=False, default=func.now())


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    customer_id = Column(Integer, nullable=False, index=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    progress = Column(Integer, nullable=True, default=0)
    status = Column(String, nullable=False, default="Gepland")  # Gepland, In uitvoering, Voltooid, Gepauzeerd
    work_orders = Column(JSON, nullable=True)  # work order ids, weak references
    created_at = Column(DateTime, nullable=False, default=func.now())


class CodeSequence(Base):
    """Last allocated sequence value per entity class and scope"""
    __tablename__ = "code_sequences"

    id = Column(Integer, primary_key=True, index=True)
    entity = Column(String, nullable=False)  # customer, material, workorder, invoice
    scope = Column(String, nullable=False)  # calendar year or "global"
    last_value = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('entity', 'scope', name='uq_code_sequence_entity_scope'),
    )
