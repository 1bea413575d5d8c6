from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from spartec.api import auth, customers, materials, work_orders, invoices, projects, dashboard
from spartec.config import settings
from spartec.database import engine, Base
from spartec import models  # noqa: F401  registers the tables with Base
from spartec.utils.constants import APP_NAME, APP_VERSION

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

if settings.storage_backend == "database":
    Base.metadata.create_all(bind=engine)
    logger.info(f"Using database storage at {engine.url.render_as_string(hide_password=True)}")
else:
    logger.warning("Using in-memory storage; data is lost on restart")

app = FastAPI(title=APP_NAME, version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api", tags=["Authentication"])
app.include_router(customers.router, prefix="/api", tags=["Customers"])
app.include_router(materials.router, prefix="/api", tags=["Materials"])
app.include_router(work_orders.router, prefix="/api", tags=["Work Orders"])
app.include_router(invoices.router, prefix="/api", tags=["Invoices"])
app.include_router(projects.router, prefix="/api", tags=["Projects"])
app.include_router(dashboard.router, prefix="/api", tags=["Dashboard"])


@app.get("/")
async def root():
    return {
        "message": f"{APP_NAME} is running",
        "version": APP_VERSION
    }


@app.get("/api/health")
async def health_check():
    return {
        "status": "healthy",
        "storage": settings.storage_backend
    }
