"""Postgres connection pool and schema migrations for the credential store."""

from pathlib import Path
from typing import Optional

import asyncpg
import structlog

from login_api.config import get_settings

logger = structlog.get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent.parent / "migrations"

_pool: Optional[asyncpg.Pool] = None


async def init_database(dsn: Optional[str] = None) -> asyncpg.Pool:
    """Create the process-wide connection pool (idempotent).

    Args:
        dsn: Postgres URL; defaults to ``Settings.postgres_url``

    Returns:
        asyncpg connection pool
    """
    global _pool

    if _pool is not None:
        return _pool

    dsn = dsn or get_settings().postgres_url

    try:
        _pool = await asyncpg.create_pool(
            dsn,
            min_size=1,
            max_size=10,
            command_timeout=30,
        )
    except Exception as e:
        logger.error("database_pool_creation_failed", error=str(e))
        raise

    logger.info("database_pool_created", max_size=10)
    return _pool


async def close_database() -> None:
    """Close the connection pool if open."""
    global _pool

    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("database_pool_closed")


async def run_migrations(
    pool: Optional[asyncpg.Pool] = None,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> int:
    """Apply every ``*.sql`` file in name order.

    Scripts use IF NOT EXISTS so re-running at every startup is safe.

    Returns:
        Number of migration files applied
    """
    pool = pool or _pool
    if pool is None:
        raise RuntimeError("Database pool not initialized. Call init_database() first.")

    migration_files = sorted(migrations_dir.glob("*.sql"))
    if not migration_files:
        logger.warning("no_migrations_found", path=str(migrations_dir))
        return 0

    async with pool.acquire() as conn:
        for migration_file in migration_files:
            try:
                await conn.execute(migration_file.read_text())
            except Exception as e:
                logger.error("migration_failed", file=migration_file.name, error=str(e))
                raise
            logger.info("migration_applied", file=migration_file.name)

    return len(migration_files)


async def health_check(pool: Optional[asyncpg.Pool] = None) -> bool:
    """Check that the credential store's database answers a trivial query.

    Not wired to ``/auth/health``, which stays dependency-free.

    Returns:
        True if the database responded, False otherwise
    """
    pool = pool or _pool
    if pool is None:
        return False

    try:
        async with pool.acquire() as conn:
            return await conn.fetchval("SELECT 1") == 1
    except (OSError, asyncpg.PostgresError) as e:
        logger.error("database_health_check_failed", error=str(e))
        return False
