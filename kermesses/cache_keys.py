"""Cache keys shared by the read handlers and the invalidation signals."""

from uuid import UUID


def kermesse_tombolas_key(kermesse_id: UUID | str) -> str:
    return f"kermesses:{kermesse_id}:tombolas"
