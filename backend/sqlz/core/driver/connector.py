"""
Open DB-API connections from a DataSource and wrap them for sqlz.

Uses psycopg (PostgreSQL), pymysql (MySQL) or sqlite3 (SQLite) based on product_type.
"""

import sqlite3
from typing import Any

import psycopg
import pymysql

from sqlz.core.config import settings
from sqlz.models import ProductTypeEnum

from .dbapi import DBAPIConnection

_DEFAULT_PORTS = {
    ProductTypeEnum.POSTGRES: 5432,
    ProductTypeEnum.MYSQL: 3306,
}


def _get(datasource: Any, key: str) -> Any:
    """Read key from a dict, or as an attribute of a DataSource or look-alike object."""
    if isinstance(datasource, dict):
        return datasource.get(key)
    return getattr(datasource, key, None)


def _resolve_product_type(
    datasource: Any, product_type: ProductTypeEnum | None
) -> ProductTypeEnum:
    pt = product_type or _get(datasource, "product_type")
    if pt is None:
        raise ValueError("product_type is required (from datasource or argument)")
    if isinstance(pt, str):
        return ProductTypeEnum(pt)
    return pt


def connect(
    datasource: Any,
    *,
    product_type: ProductTypeEnum | None = None,
) -> DBAPIConnection:
    """
    Open a connection from a DataSource, dict, or any object with the same attributes.

    - datasource: host, port, database, username, password, product_type.
      SQLite only needs database (a path or ":memory:").
    - product_type: override when datasource has none or a string one.
    """
    pt = _resolve_product_type(datasource, product_type)
    database = _get(datasource, "database")
    if database is None:
        raise ValueError("datasource must provide database")
    timeout = settings.SQLZ_CONNECT_TIMEOUT

    if pt == ProductTypeEnum.SQLITE:
        raw = sqlite3.connect(database, timeout=timeout, check_same_thread=False)
        return DBAPIConnection(raw, pt)

    host = _get(datasource, "host")
    port = _get(datasource, "port") or _DEFAULT_PORTS[pt]
    username = _get(datasource, "username")
    password = _get(datasource, "password")
    for name, val in [("host", host), ("username", username)]:
        if val is None:
            raise ValueError(f"datasource must provide {name}")
    password = password if password is not None else ""

    if pt == ProductTypeEnum.POSTGRES:
        raw = psycopg.connect(
            host=host,
            port=int(port),
            dbname=database,
            user=username,
            password=password,
            connect_timeout=timeout,
        )
        return DBAPIConnection(raw, pt)
    if pt == ProductTypeEnum.MYSQL:
        raw = pymysql.connect(
            host=host,
            port=int(port),
            database=database,
            user=username,
            password=password,
            connect_timeout=timeout,
        )
        return DBAPIConnection(raw, pt)
    raise ValueError(f"Unsupported product_type: {pt}")
