"""Single-statement INSERT ... ON CONFLICT DO UPDATE for the dialects we run on."""
from typing import Any, Dict, Iterable, Sequence
from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert(
    db: Session,
    model,
    values: Dict[str, Any],
    *,
    index_elements: Sequence[str],
    update_columns: Iterable[str],
) -> None:
    """Insert a row or update it in place when index_elements already exist.

    The statement is executed on the session but not committed.
    """
    dialect = db.get_bind().dialect.name
    try:
        insert = _INSERT_BY_DIALECT[dialect]
    except KeyError:
        raise NotImplementedError(f"Upsert is not supported on the '{dialect}' dialect")

    stmt = insert(model).values(**values)
    set_ = {column: stmt.excluded[column] for column in update_columns}
    set_["updated_at"] = func.now()
    stmt = stmt.on_conflict_do_update(index_elements=list(index_elements), set_=set_)
    db.execute(stmt)
