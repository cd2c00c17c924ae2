"""
Database adapter interfaces and implementations.
Provides abstraction over database operations for dependency injection.
"""

import asyncio
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any, Protocol

import asyncpg

from asset_catalog.exceptions import DuplicateKeyError, StoreConnectionError
from asset_catalog.infrastructure.observability import get_infrastructure_logger

log = get_infrastructure_logger("database-adapter")

_TRANSPORT_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.InterfaceError,
)


class IDatabaseAdapter(Protocol):
    """
    Protocol defining database operations interface.
    Enables dependency injection and testing with different implementations.
    """

    async def connect(self) -> None:
        """Establish database connection."""
        ...

    async def disconnect(self) -> None:
        """Close database connection."""
        ...

    async def execute(self, query: str, *args: Any) -> str:
        """
        Execute a statement without returning rows.

        Returns:
            Command status tag (e.g. 'UPDATE 1')
        """
        ...

    async def fetch(self, query: str, *args: Any) -> Sequence[asyncpg.Record]:
        """Fetch all rows."""
        ...

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        """Fetch single row, None if the query matched nothing."""
        ...

    async def fetchval(self, query: str, *args: Any) -> Any:
        """Fetch the first column of the first row."""
        ...


def affected_rows(status: str) -> int:
    """
    Parse the number of affected rows from a command status tag.

    'UPDATE 3' -> 3, 'INSERT 0 1' -> 1, 'SELECT' -> 0
    """
    parts = status.split() if status else []
    if len(parts) < 2 or not parts[-1].isdigit():
        return 0
    return int(parts[-1])


class DatabaseAdapter:
    """
    Concrete implementation over an asyncpg connection pool.

    Translates driver errors into the catalog taxonomy:
    unique violations become DuplicateKeyError, transport failures become
    StoreConnectionError. Every other PostgresError propagates unchanged.
    """

    def __init__(
        self,
        dsn: str,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float | None = 30.0,
        name: str = "postgres",
    ):
        """
        Initialize adapter.

        Args:
            dsn: PostgreSQL connection URL
            min_size: Minimum pool size
            max_size: Maximum pool size
            command_timeout: Default statement timeout in seconds
            name: Store name used in logs and errors ('postgres', 'timeseries')
        """
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self.name = name
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """Establish database connection."""
        if self._pool is not None:
            return
        async with self._translate_errors():
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                command_timeout=self._command_timeout,
            )
        log.info("pool_created", store=self.name, max_size=self._max_size)

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._pool is None:
            return
        await self._pool.close()
        self._pool = None
        log.info("pool_closed", store=self.name)

    async def execute(self, query: str, *args: Any) -> str:
        async with self._translate_errors():
            return await self.pool.execute(query, *args)

    async def fetch(self, query: str, *args: Any) -> Sequence[asyncpg.Record]:
        async with self._translate_errors():
            return await self.pool.fetch(query, *args)

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        async with self._translate_errors():
            return await self.pool.fetchrow(query, *args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        async with self._translate_errors():
            return await self.pool.fetchval(query, *args)

    @property
    def pool(self) -> asyncpg.Pool:
        """Access underlying connection pool."""
        if self._pool is None:
            raise RuntimeError("Database not connected")
        return self._pool

    @asynccontextmanager
    async def _translate_errors(self) -> AsyncIterator[None]:
        try:
            yield
        except asyncpg.exceptions.UniqueViolationError as e:
            raise DuplicateKeyError(
                str(e),
                constraint=getattr(e, "constraint_name", None),
                table=getattr(e, "table_name", None),
            ) from e
        except asyncpg.exceptions.DataError:
            raise
        except _TRANSPORT_ERRORS as e:
            log.error("store_unreachable", store=self.name, error=str(e))
            raise StoreConnectionError(f"{self.name}: {e}") from e
