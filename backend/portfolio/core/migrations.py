import logging
from pathlib import Path
from typing import Optional

from portfolio.core.db import db_conn
from portfolio.core.settings import settings

log = logging.getLogger("uvicorn.error")
_REPO_ROOT = Path(__file__).resolve().parents[3]
_DEFAULT_SQL_PATH = _REPO_ROOT / "db" / "init" / "01_contact.sql"


def _sql_candidates() -> tuple[list[Path], Optional[Path]]:
    candidates: list[Path] = []
    if settings.contact_migration_file:
        candidates.append(Path(settings.contact_migration_file))
    candidates.append(_DEFAULT_SQL_PATH)

    for candidate in candidates:
        if candidate.exists():
            return candidates, candidate

    return candidates, None


async def ensure_contact_schema() -> bool:
    candidates, sql_path = _sql_candidates()
    if not sql_path:
        log.warning(
            "Contact migration file not found, tried %s",
            ", ".join(str(p) for p in candidates),
        )
        return False

    sql = sql_path.read_text()
    if not sql.strip():
        return False

    async with db_conn() as (conn, cur):
        log.info("Ensuring contact schema exists using %s", sql_path.name)
        await cur.execute(sql)
        await conn.commit()
    return True
