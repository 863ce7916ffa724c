"""Insert-or-update for rows keyed by a unique constraint."""
import logging
from typing import Any, Callable

from sqlalchemy.exc import IntegrityError

from ..extensions import db

logger = logging.getLogger(__name__)


def upsert(
    model: Any,
    keys: dict[str, Any],
    values: dict[str, Any],
    guard: Callable[[], None] | None = None,
) -> Any:
    """Write ``values`` to the row identified by ``keys``, creating it if needed.

    The caller's unique constraint on ``keys`` guarantees at most one row. If
    a concurrent request inserts the same key first, the insert fails and the
    write is redone as an update. Commits the session.

    Args:
        model: Mapped class to write.
        keys: Column values forming the unique key.
        values: Column values to set.
        guard: Optional check run at the start of each write transaction;
            it raises to abort the write.

    Returns:
        The persisted instance.
    """
    if guard is not None:
        guard()
    row = _find(model, keys)
    if row is None:
        row = model(**keys, **values)
        db.session.add(row)
        try:
            db.session.commit()
            return row
        except IntegrityError:
            db.session.rollback()
            logger.info("Concurrent insert on %s %s; updating instead", model.__tablename__, keys)
            if guard is not None:
                guard()
            row = _find(model, keys)
            if row is None:
                raise

    for name, value in values.items():
        setattr(row, name, value)
    db.session.commit()
    return row


def _find(model: Any, keys: dict[str, Any]) -> Any:
    return db.session.execute(db.select(model).filter_by(**keys)).scalar_one_or_none()
