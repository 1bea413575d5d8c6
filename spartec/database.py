from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from spartec.config import settings

_connection_url = settings.database_connection_url

if _connection_url.startswith("sqlite"):
    engine = create_engine(_connection_url, connect_args={"check_same_thread": False})
else:
    engine = create_engine(_connection_url, pool_pre_ping=True)


# Ensure search_path is set to public schema for PostgreSQL
@event.listens_for(engine, "connect")
def set_search_path(dbapi_connection, connection_record):
    if engine.dialect.name != "postgresql":
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("SET search_path TO public")
    cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
