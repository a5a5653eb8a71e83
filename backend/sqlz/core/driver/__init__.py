"""
DB-API 2.0 backend for sqlz: connection helpers and the adapter classes.
"""

from .connector import connect
from .dbapi import DBAPIConnection, DBAPIRow, DBAPIRows, DBAPITx, Result

__all__ = [
    "connect",
    "DBAPIConnection",
    "DBAPITx",
    "DBAPIRow",
    "DBAPIRows",
    "Result",
]
