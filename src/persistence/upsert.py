"""Dialect-aware INSERT .. ON CONFLICT DO UPDATE."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session


def insert_for(session: Session, model):
    """The `insert` construct matching the session's dialect."""
    if session.get_bind().dialect.name == "sqlite":
        return sqlite.insert(model)
    return postgresql.insert(model)


def build_upsert(
    session: Session,
    model,
    rows: list[dict],
    index_elements: list[str],
    exclude_from_update: Optional[Iterable[str]] = None,
):
    """
    Multi-row upsert of `rows` keyed on `index_elements`.

    Columns in `exclude_from_update` are written on insert but left as they
    are on conflict. Every row must carry the same keys.
    """
    skip = set(index_elements) | set(exclude_from_update or ())
    stmt = insert_for(session, model).values(rows)
    update_columns = [key for key in rows[0] if key not in skip]
    if not update_columns:
        return stmt.on_conflict_do_nothing(index_elements=index_elements)
    return stmt.on_conflict_do_update(
        index_elements=index_elements,
        set_={column: stmt.excluded[column] for column in update_columns},
    )
