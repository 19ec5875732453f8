"""Lazily created, process-wide database handle"""

import atexit
import base64
import binascii
import logging
from threading import Lock
from typing import Any, Dict, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from emi_gateway.config import Settings
from emi_gateway.domain.exceptions import ConfigurationError, PersistenceError
from emi_gateway.infrastructure.database.models import Base


def resolve_store_url(config: Settings) -> str:
    """
    Pick the connection URL for the durable store.

    An emulator URL wins; otherwise STORE_CREDENTIALS must hold a base64-encoded URL.

    Raises:
        ConfigurationError: Neither is set, or the credentials do not decode
    """
    if config.store_emulator_url:
        return config.store_emulator_url

    if not config.store_credentials:
        raise ConfigurationError(
            "Durable store selected but neither STORE_CREDENTIALS nor STORE_EMULATOR_URL is set"
        )

    try:
        url = base64.b64decode(config.store_credentials.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ConfigurationError("STORE_CREDENTIALS is not a valid base64-encoded connection URL") from e

    if not url.strip():
        raise ConfigurationError("STORE_CREDENTIALS decodes to an empty connection URL")
    return url.strip()


def _engine_options(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 10,
        "pool_recycle": 3600,
    }


class StoreHandle:
    """
    Engine and session factory created on first use, exactly once.

    Connection settings are read when the first session is requested, so a
    misconfigured durable store fails the first request rather than startup.
    The engine is disposed at interpreter exit.
    """

    def __init__(self, config: Settings):
        self._config = config
        self._lock = Lock()
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._exit_hook_registered = False

    @property
    def session_factory(self) -> sessionmaker:
        factory = self._session_factory
        if factory is None:
            with self._lock:
                if self._session_factory is None:
                    self._connect()
                factory = self._session_factory
        return factory

    @property
    def initialized(self) -> bool:
        return self._session_factory is not None

    def _connect(self) -> None:
        url = resolve_store_url(self._config)

        try:
            engine = create_engine(url, **_engine_options(url))
        except ArgumentError as e:
            raise ConfigurationError(f"Invalid store connection URL: {e}") from e

        try:
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as e:
            engine.dispose()
            raise PersistenceError(f"Calculation store unreachable: {e}") from e

        if not self._exit_hook_registered:
            atexit.register(self.dispose)
            self._exit_hook_registered = True
        self._engine = engine
        self._session_factory = sessionmaker(autoflush=False, bind=engine)
        logging.info("Calculation store connected", extra={"dialect": engine.dialect.name})

    def dispose(self) -> None:
        """Drop the engine; the next session request reconnects"""
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._session_factory = None
