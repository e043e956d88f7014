from __future__ import annotations

from contextvars import ContextVar
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Awaitable, Callable, Type, TypeVar, cast

from sqlalchemy import DateTime, TypeDecorator
from sqlalchemy import select as sa_select
from sqlalchemy.engine import Dialect
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql import Select
from starlette.types import ASGIApp, Receive, Scope, Send

from tutorbook.settings import settings


T = TypeVar("T")
R = TypeVar("R")


class Base(DeclarativeBase):
    pass


class UTCDateTime(TypeDecorator[datetime]):
    """Store timezone aware datetimes as naive UTC and restore the UTC tzinfo on load."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


def select(entity: Any, *args: Any) -> Select[Any]:
    return sa_select(entity, *args)


def filter_by(cls: Any, *args: Any, **kwargs: Any) -> Select[Any]:
    return select(cls).where(*args).filter_by(**kwargs)


class DB:
    def __init__(self, url: str, pool_recycle: int, pool_size: int, max_overflow: int, echo: bool) -> None:
        options: dict[str, Any] = {"echo": echo}
        if not url.startswith("sqlite"):
            options |= {"pool_recycle": pool_recycle, "pool_size": pool_size, "max_overflow": max_overflow}

        self.engine = create_async_engine(url, **options)
        self._session: ContextVar[AsyncSession | None] = ContextVar("session", default=None)

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    def create_session(self) -> AsyncSession:
        session = AsyncSession(self.engine, expire_on_commit=False)
        self._session.set(session)
        return session

    @property
    def session(self) -> AsyncSession:
        session = self._session.get()
        if session is None:
            raise RuntimeError("No database session in this context")
        return session

    async def add(self, obj: T) -> T:
        self.session.add(obj)
        return obj

    async def all(self, statement: Select[Any]) -> list[Any]:
        return list((await self.session.execute(statement)).scalars())

    async def first(self, statement: Select[Any]) -> Any | None:
        return (await self.session.execute(statement)).scalars().first()

    async def get(self, cls: Type[T], *args: Any, **kwargs: Any) -> T | None:
        return cast(T | None, await self.first(filter_by(cls, *args, **kwargs)))

    async def commit(self) -> None:
        if (session := self._session.get()) is not None:
            await session.commit()

    async def rollback(self) -> None:
        if (session := self._session.get()) is not None:
            await session.rollback()

    async def close(self) -> None:
        if (session := self._session.get()) is not None:
            await session.close()
            self._session.set(None)


db = DB(
    settings.database_url,
    pool_recycle=settings.pool_recycle,
    pool_size=settings.pool_size,
    max_overflow=settings.max_overflow,
    echo=settings.sql_show_statements,
)


def db_wrapper(f: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
    """Run the coroutine inside its own database session and commit afterwards."""

    @wraps(f)
    async def inner(*args: Any, **kwargs: Any) -> R:
        db.create_session()
        try:
            result = await f(*args, **kwargs)
            await db.commit()
            return result
        finally:
            await db.close()

    return inner


class DBMiddleware:
    """Open a database session for every http request. Websocket handlers manage their own sessions."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        db.create_session()
        try:
            await self.app(scope, receive, send)
            await db.commit()
        finally:
            await db.close()
