from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Optional, List


class Settings(BaseSettings):
    # Database Configuration
    database_url: Optional[str] = None
    db_username: Optional[str] = None
    db_password: Optional[str] = None
    db_host: str = "localhost"
    db_port: str = "5432"
    db_name: Optional[str] = None

    # "database" or "memory"
    storage_backend: str = "database"

    # Authentication
    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: Optional[int] = 480

    @field_validator('algorithm', mode='before')
    @classmethod
    def parse_algorithm(cls, v):
        if v is None or v == '':
            return "HS256"
        return v

    @field_validator('access_token_expire_minutes', mode='before')
    @classmethod
    def parse_token_expire(cls, v):
        if v is None or v == '':
            return 480
        return int(v)

    @field_validator('storage_backend', mode='before')
    @classmethod
    def parse_storage_backend(cls, v):
        if v is None or v == '':
            return "database"
        v = str(v).lower()
        if v not in ("database", "memory"):
            raise ValueError("storage_backend must be 'database' or 'memory'")
        return v

    # Server
    cors_origins: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    log_level: str = "INFO"

    # Dashboard
    dashboard_list_limit: int = 5

    # Code allocation
    code_allocation_retries: int = 3

    # Work orders
    strict_work_order_transitions: bool = False

    # First administrator for the memory backend; both must be set, there is no default account
    admin_username: Optional[str] = None
    admin_password_hash: Optional[str] = None
    admin_full_name: str = "Beheerder"

    @property
    def database_connection_url(self) -> str:
        """Build database URL from individual components or use direct URL"""
        if all([self.db_username, self.db_password, self.db_host, self.db_port, self.db_name]):
            return f"postgresql://{self.db_username}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"
        elif self.database_url:
            return self.database_url
        else:
            return "sqlite:///./spartec.db"  # Fallback to SQLite

    class Config:
        env_file = ".env"


settings = Settings()
