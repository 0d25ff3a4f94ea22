"""
PostgreSQL case record store - connection pool management and JSONB key-value table
"""

import json
import logging
from typing import Any, Dict, Optional
import asyncpg

from cleartech.models.case_record import CaseRecord
from cleartech.services.errors import StorageError
from cleartech.storage.base import CaseRecordRepository

logger = logging.getLogger(__name__)

_DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS case_records (
        client_key TEXT PRIMARY KEY,
        data JSONB NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
    )
"""

class PostgresCaseRepository(CaseRecordRepository):
    """Case records as JSONB rows keyed by ``form:<clientId>``"""

    name = "postgres"

    def __init__(self, database_url: str, min_size: int = 2, max_size: int = 10, **kwargs):
        super().__init__(**kwargs)
        self.database_url = database_url
        self.min_size = min_size
        self.max_size = max_size
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self) -> None:
        """Initialize database connection pool and the case_records table"""
        self.pool = await asyncpg.create_pool(
            self.database_url,
            min_size=self.min_size,
            max_size=self.max_size,
            command_timeout=60,
            statement_cache_size=0  # Fix for pgbouncer compatibility
        )

        async with self.pool.acquire() as conn:
            await conn.execute(CREATE_TABLE_SQL)

        logger.info("Case record database initialized successfully")

    async def close(self) -> None:
        """Close database connection pool"""
        if self.pool:
            await self.pool.close()
            self.pool = None
        logger.info("Case record database connections closed")

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise StorageError("Case record database is not initialized")
        return self.pool

    async def load(self, client_id: str) -> Optional[Dict[str, Any]]:
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                raw = await conn.fetchval(
                    "SELECT data FROM case_records WHERE client_key = $1",
                    self.key_for(client_id)
                )
        except _DB_ERRORS as e:
            logger.error(f"Failed to load case record for client {client_id}: {e}")
            raise StorageError(f"Failed to load case record: {e}", client_id) from e

        if raw is None:
            return None
        return json.loads(raw) if isinstance(raw, str) else raw

    async def store(self, client_id: str, record: CaseRecord) -> None:
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                await conn.execute("""
                    INSERT INTO case_records (client_key, data, updated_at)
                    VALUES ($1, $2::jsonb, NOW())
                    ON CONFLICT (client_key)
                    DO UPDATE SET data = EXCLUDED.data, updated_at = NOW()
                """,
                self.key_for(client_id), json.dumps(record.to_storage()))
        except _DB_ERRORS as e:
            logger.error(f"Failed to store case record for client {client_id}: {e}")
            raise StorageError(f"Failed to store case record: {e}", client_id) from e

        logger.info(f"Stored case record for client {client_id}")

    async def delete(self, client_id: str) -> None:
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                await conn.execute(
                    "DELETE FROM case_records WHERE client_key = $1",
                    self.key_for(client_id)
                )
        except _DB_ERRORS as e:
            logger.error(f"Failed to delete case record for client {client_id}: {e}")
            raise StorageError(f"Failed to delete case record: {e}", client_id) from e

        logger.info(f"Deleted case record for client {client_id}")
