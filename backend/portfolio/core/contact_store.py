# portfolio/core/contact_store.py
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from portfolio.core.db import db_conn
from portfolio.lib.submission import Submission

log = logging.getLogger("uvicorn.error")


@dataclass
class StoredSubmission:
    user_id: int
    message_id: int


@dataclass
class UserRow:
    id: int
    email: str
    name: str


@dataclass
class MessageRow:
    id: int
    user_id: int
    subject: str
    message: str
    created_at: Optional[datetime] = None


# The no-op update makes RETURNING yield the existing row on conflict while
# keeping the first stored name.
UPSERT_USER_SQL = """
    INSERT INTO users (email, name)
    VALUES (%s, %s)
    ON CONFLICT (email) DO UPDATE SET email = EXCLUDED.email
    RETURNING id
"""

INSERT_MESSAGE_SQL = """
    INSERT INTO messages (user_id, subject, message)
    VALUES (%s, %s, %s)
    RETURNING id
"""


class ContactStore:
    """Postgres-backed users/messages, written as one transaction per submission."""

    async def record_submission(self, submission: Submission) -> StoredSubmission:
        async with db_conn() as (conn, cur):
            async with conn.transaction():
                await cur.execute(UPSERT_USER_SQL, (submission.email, submission.name))
                user_row = await cur.fetchone()
                if not user_row:
                    raise RuntimeError("user upsert returned no row")
                await cur.execute(
                    INSERT_MESSAGE_SQL,
                    (user_row[0], submission.subject, submission.message),
                )
                message_row = await cur.fetchone()
                if not message_row:
                    raise RuntimeError("message insert returned no row")
        log.info(f"[store] recorded message {message_row[0]} for user {user_row[0]}")
        return StoredSubmission(user_id=user_row[0], message_id=message_row[0])

    async def get_user_by_email(self, email: str) -> Optional[UserRow]:
        async with db_conn() as (conn, cur):
            await cur.execute("SELECT id, email, name FROM users WHERE email=%s", (email,))
            row = await cur.fetchone()
        if not row:
            return None
        return UserRow(id=row[0], email=row[1], name=row[2])

    async def list_messages(self, user_id: int) -> List[MessageRow]:
        async with db_conn() as (conn, cur):
            await cur.execute(
                """
                SELECT id, user_id, subject, message, created_at
                FROM messages
                WHERE user_id=%s
                ORDER BY created_at ASC, id ASC
                """,
                (user_id,),
            )
            rows = await cur.fetchall()
        return [MessageRow(id=r[0], user_id=r[1], subject=r[2], message=r[3], created_at=r[4]) for r in rows]
