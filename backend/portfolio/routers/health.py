# portfolio/routers/health.py
from fastapi import APIRouter
from portfolio.core.db import db_conn

router = APIRouter(prefix="/health", tags=["health"])

@router.get("")
async def health_root():
    return {"status": "ok"}

@router.get("/db")
async def health_db():
    async with db_conn() as (conn, cur):
        await cur.execute("SELECT current_database(), current_user, version()")
        db_name, db_user, pg_version = await cur.fetchone()

        await cur.execute("""
            SELECT EXISTS (SELECT 1 FROM information_schema.tables WHERE table_schema='public' AND table_name='users'),
                   EXISTS (SELECT 1 FROM information_schema.tables WHERE table_schema='public' AND table_name='messages')
        """)
        exists = await cur.fetchone()

    return {
        "ok": True,
        "database": db_name,
        "user": db_user,
        "server_version": pg_version,
        "tables": {
            "users":    exists[0],
            "messages": exists[1],
        }
    }
