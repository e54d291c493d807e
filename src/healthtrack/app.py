"""Main application that wires all components together."""

from __future__ import annotations

import asyncio
import logging
import signal
from pathlib import Path
from typing import TYPE_CHECKING

from healthtrack.api import APIServer, create_app
from healthtrack.attachments import (
    AttachmentLifecycleManager,
    ConfirmationReconciler,
    PresignedAccessResolver,
    StorageKeyCodec,
    UploadAuthorizationIssuer,
)
from healthtrack.config import load_config, resolve_env_var
from healthtrack.db import detect_dialect_from_dsn
from healthtrack.records import SQLAlchemyRecordStore
from healthtrack.storage import create_object_store

if TYPE_CHECKING:
    from healthtrack.interfaces import ObjectStore, RecordStore
    from healthtrack.models.config import Config

logger = logging.getLogger(__name__)


class AttachmentServices:
    """The attachment protocol components built over one object store and record store."""

    def __init__(self, config: Config, object_store: ObjectStore, records: RecordStore) -> None:
        s3_config = config.storage.s3
        if s3_config is None:
            raise RuntimeError("storage.s3 config is required")
        attachments = config.attachments

        self.codec = StorageKeyCodec(s3_config, key_prefix=attachments.key_prefix)
        self.issuer = UploadAuthorizationIssuer(object_store, self.codec, attachments)
        self.resolver = PresignedAccessResolver(
            object_store, self.codec, ttl_s=attachments.read_url_ttl_s
        )
        self.reconciler = ConfirmationReconciler(object_store, records)
        self.lifecycle = AttachmentLifecycleManager(object_store, records, self.codec)


class Application:
    """Main application that orchestrates all components.

    Handles component creation, lifecycle, and graceful shutdown.
    """

    def __init__(self, config_path: Path) -> None:
        self._config_path = config_path
        self._config: Config | None = None

        # Components (created in _create_components)
        self._object_store: ObjectStore | None = None
        self._records: RecordStore | None = None
        self._services: AttachmentServices | None = None
        self._api_server: APIServer | None = None

        # Shutdown state
        self._shutdown_event = asyncio.Event()
        self._shutdown_started = False

    async def run(self) -> None:
        """Run the application until a shutdown signal arrives."""
        logger.info("Starting healthtrack application...")

        self._config = load_config(self._config_path)
        logger.info("Config loaded from %s", self._config_path)

        await self._create_components()
        self._setup_signal_handlers()

        if self._api_server:
            await self._api_server.start()

        logger.info("Application started")

        await self._shutdown_event.wait()
        await self.shutdown()

    async def _create_components(self) -> None:
        config = self._require_config()

        self._object_store = create_object_store(config.storage)
        self._records = await self._create_record_store(config)
        self._services = AttachmentServices(config, self._object_store, self._records)

        storage_ok = await self._object_store.ping()
        if not storage_ok:
            logger.warning("Object store unreachable at startup; attachment routes will fail")

        server_cfg = config.server
        self._api_server = APIServer(
            app=create_app(self),
            host=server_cfg.host,
            port=server_cfg.port,
        )
        logger.info("All components created")

    async def _create_record_store(self, config: Config) -> SQLAlchemyRecordStore:
        state_cfg = config.state_store
        dsn = state_cfg.dsn
        if not dsn and state_cfg.dsn_env:
            dsn = resolve_env_var(state_cfg.dsn_env)
        if not dsn:
            raise RuntimeError("Database DSN is required for state_store")
        store = SQLAlchemyRecordStore(dsn)
        # SQLite is for local development; PostgreSQL schemas come from alembic.
        await store.initialize(create_schema=detect_dialect_from_dsn(dsn) == "sqlite")
        return store

    def _setup_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self._handle_signal, sig)

    def _handle_signal(self, sig: signal.Signals) -> None:
        if self._shutdown_started:
            logger.warning("Shutdown already in progress, ignoring signal")
            return

        logger.info("Received signal %s, initiating shutdown...", sig.name)
        self._shutdown_started = True
        self._shutdown_event.set()

    async def shutdown(self) -> None:
        """Graceful shutdown of all components."""
        logger.info("Shutting down application...")

        # Stop API server first to prevent new requests during shutdown.
        if self._api_server:
            await self._api_server.stop()

        if self._records:
            await self._records.shutdown()

        if self._object_store:
            await self._object_store.shutdown()

        logger.info("Application shutdown complete")

    def _require_config(self) -> Config:
        if self._config is None:
            raise RuntimeError("Config not loaded")
        return self._config

    def _require_services(self) -> AttachmentServices:
        if self._services is None:
            raise RuntimeError("Application components not created")
        return self._services

    @property
    def config(self) -> Config:
        return self._require_config()

    @property
    def object_store(self) -> ObjectStore:
        if self._object_store is None:
            raise RuntimeError("Object store not initialized")
        return self._object_store

    @property
    def records(self) -> RecordStore:
        if self._records is None:
            raise RuntimeError("Record store not initialized")
        return self._records

    @property
    def issuer(self) -> UploadAuthorizationIssuer:
        return self._require_services().issuer

    @property
    def resolver(self) -> PresignedAccessResolver:
        return self._require_services().resolver

    @property
    def reconciler(self) -> ConfirmationReconciler:
        return self._require_services().reconciler

    @property
    def lifecycle(self) -> AttachmentLifecycleManager:
        return self._require_services().lifecycle
