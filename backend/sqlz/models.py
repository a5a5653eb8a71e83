"""
Connection and transaction option models.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProductTypeEnum(str, Enum):
    """Supported database product types (postgres, mysql, sqlite)."""

    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE = "sqlite"


class IsolationLevel(str, Enum):
    READ_UNCOMMITTED = "READ UNCOMMITTED"
    READ_COMMITTED = "READ COMMITTED"
    REPEATABLE_READ = "REPEATABLE READ"
    SERIALIZABLE = "SERIALIZABLE"


class TxOptions(BaseModel):
    """Options for begin_tx. Defaults leave the backend's own settings in place."""

    model_config = ConfigDict(frozen=True)

    isolation: IsolationLevel | None = None
    read_only: bool = False


class DataSource(BaseModel):
    """
    Where to connect. For SQLite only ``database`` (a file path or ``:memory:``) is used.
    """

    product_type: ProductTypeEnum
    host: str | None = Field(default=None, max_length=255)
    port: int | None = None
    database: str = Field(max_length=1024)
    username: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=512)
