import asyncio
import weakref

import aiosqlite
import structlog

from guideflow.config import settings

logger = structlog.get_logger()

_db: aiosqlite.Connection | None = None

# Write batches on a shared connection must not interleave between commits.
_write_locks: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()

DDL_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS guides (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        description TEXT,
        slug TEXT NOT NULL UNIQUE,
        is_active INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS flow_boxes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        guide_id INTEGER NOT NULL REFERENCES guides(id) ON DELETE CASCADE,
        title TEXT NOT NULL,
        description TEXT,
        position INTEGER NOT NULL,
        is_visible INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS steps (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        flow_box_id INTEGER NOT NULL REFERENCES flow_boxes(id) ON DELETE CASCADE,
        title TEXT NOT NULL,
        content TEXT,
        position INTEGER NOT NULL,
        is_visible INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_flow_boxes_guide ON flow_boxes(guide_id, position)",
    "CREATE INDEX IF NOT EXISTS idx_steps_flow_box ON steps(flow_box_id, position)",
]


async def apply_schema(db: aiosqlite.Connection) -> None:
    await db.execute("PRAGMA foreign_keys=ON")
    for ddl in DDL_STATEMENTS:
        await db.execute(ddl)
    await db.commit()


async def init_database(path: str | None = None) -> aiosqlite.Connection:
    global _db
    db_path = path or settings.db_path
    _db = await aiosqlite.connect(db_path)
    _db.row_factory = aiosqlite.Row
    if db_path != ":memory:":
        await _db.execute("PRAGMA journal_mode=WAL")
    await apply_schema(_db)

    logger.info("database_initialized", path=db_path)
    return _db


async def close_database() -> None:
    global _db
    if _db is not None:
        await _db.close()
        _db = None
        logger.info("database_closed")


def get_db() -> aiosqlite.Connection:
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _db


async def check_health() -> None:
    db = get_db()
    cursor = await db.execute("SELECT 1")
    await cursor.close()


def get_write_lock(db: aiosqlite.Connection) -> asyncio.Lock:
    lock = _write_locks.get(db)
    if lock is None:
        lock = asyncio.Lock()
        _write_locks[db] = lock
    return lock
