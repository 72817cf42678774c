"""Synchronous MongoDB client (PyMongo) shared by the repositories."""
from __future__ import annotations

import logging

import certifi
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from notiq.core.config import settings
from notiq.core.exceptions import ServiceUnavailable

_log = logging.getLogger("notiq.mongo")

_client: MongoClient | None = None
_db: Database | None = None


def _client_kwargs(uri: str) -> dict:
    # Conservative timeout; certifi CA bundle whenever TLS is in play
    kwargs = dict(serverSelectionTimeoutMS=15000)
    if uri.startswith("mongodb+srv://"):
        # SRV already implies TLS
        kwargs["tlsCAFile"] = certifi.where()
    elif settings.mongo_tls:
        kwargs["tls"] = True
        kwargs["tlsCAFile"] = certifi.where()
        kwargs["tlsAllowInvalidCertificates"] = settings.mongo_tls_insecure
        kwargs["tlsAllowInvalidHostnames"] = settings.mongo_tls_allow_invalid_hostnames
    return kwargs


def init_mongo() -> None:
    """
    Create the client and validate the connection (ping).
    Call once from the FastAPI lifespan.
    """
    global _client, _db
    uri = settings.mongo_uri
    try:
        _client = MongoClient(uri, **_client_kwargs(uri))
        _client.admin.command("ping")
        _db = _client[settings.mongo_db]
        _log.info("Mongo connected (db=%s)", settings.mongo_db)
    except ServerSelectionTimeoutError as e:
        # Keep the app up: requests needing the db will answer 503
        _log.warning("Mongo unreachable (timeout): %s", e)
        _client = None
        _db = None
    except PyMongoError as e:
        _log.warning("Mongo connection error: %s", e)
        _client = None
        _db = None


def close_mongo() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


def get_db() -> Database:
    """
    Return the database handle.
    Use it from repositories/services, never from routers.
    """
    if _db is None:
        raise ServiceUnavailable("Database not available, try again later")
    return _db


def db_ready() -> bool:
    return _db is not None
