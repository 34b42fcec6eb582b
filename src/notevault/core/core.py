from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator, Iterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from notevault.config import Config
from notevault.core.modules.token.codec import TokenCodec

if TYPE_CHECKING:
    from notevault.core.modules.access.service import AccessService
    from notevault.core.modules.csrf.service import CsrfService
    from notevault.core.modules.export.service import ExportService
    from notevault.core.modules.note.service import NoteService
    from notevault.core.modules.session.service import SessionService
    from notevault.core.modules.user.service import UserService

logger = structlog.get_logger(__name__)

# (attribute, "module:Class"); started in this order, stopped in reverse
SERVICE_REGISTRY: tuple[tuple[str, str], ...] = (
    ("user", "notevault.core.modules.user.service:UserService"),
    ("session", "notevault.core.modules.session.service:SessionService"),
    ("csrf", "notevault.core.modules.csrf.service:CsrfService"),
    ("access", "notevault.core.modules.access.service:AccessService"),
    ("note", "notevault.core.modules.note.service:NoteService"),
    ("export", "notevault.core.modules.export.service:ExportService"),
)


class Service:
    """A unit of domain logic sharing one database handle and, once wired, the Core."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Hook for index creation and warm-up."""

    async def on_stop(self) -> None:
        """Hook for releasing resources."""

    @property
    def core(self) -> Core:
        if self._core is None:
            raise RuntimeError(f"{type(self).__name__} used before Core was attached")
        return self._core

    def set_core(self, core: Core) -> None:
        self._core = core


def _load_service_class(target: str) -> type[Service]:
    module_path, _, class_name = target.partition(":")
    return cast(type[Service], getattr(importlib.import_module(module_path), class_name))


class Services:
    """Named service instances built from SERVICE_REGISTRY."""

    user: UserService
    session: SessionService
    csrf: CsrfService
    access: AccessService
    note: NoteService
    export: ExportService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._ordered: list[Service] = []
        for name, target in SERVICE_REGISTRY:
            service = _load_service_class(target)(database)
            setattr(self, name, service)
            self._ordered.append(service)

    def __iter__(self) -> Iterator[Service]:
        return iter(self._ordered)

    def set_core(self, core: Core) -> None:
        for service in self:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self._ordered):
            await service.on_stop()


class Core:
    """Holds configuration, the database, both token codecs and the services.

    A database may be injected, in which case no client is opened here and
    closing it stays with the caller.
    """

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]] | None
    database: AsyncDatabase[dict[str, Any]]
    session_codec: TokenCodec
    csrf_codec: TokenCodec
    services: Services

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self.config = config
        self.mongo_client = None
        if database is None:
            self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
            database = self.mongo_client.get_database(urlparse(config.database_url).path.lstrip("/"))
        self.database = database

        self.session_codec = TokenCodec(config.session_signing_secret)
        self.csrf_codec = TokenCodec(config.csrf_signing_secret)
        self._warn_about_secrets()

        self.services = Services(database)
        self.services.set_core(self)

    def _warn_about_secrets(self) -> None:
        if self.config.jwt_secret is None:
            logger.warning("development_secret_in_use", environment=self.config.environment)
        if self.config.csrf_secret_is_shared:
            logger.warning("csrf_secret_shared_with_session_secret")

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()
        logger.info("core_started", database=self.database.name)

    async def on_stop(self) -> None:
        await self.services.stop_all()
        if self.mongo_client is not None:
            await self.mongo_client.aclose()
