"""
Scoped unit of work over the Flask-SQLAlchemy session.

Every ledger write sequence (clear-then-regenerate for a match, check-then-insert
for bonuses) runs inside transaction() so it is committed as a whole or not at all.
"""

from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from league import db
from league.errors import StorageError


@contextmanager
def transaction(description: str = 'unit of work'):
    """
    Commit on success, roll back on any error.

    SQLAlchemy failures are re-raised as StorageError so callers can treat them
    as transient; other exceptions propagate unchanged after the rollback.

    Example:
        with transaction('recompute match 7') as session:
            session.add(entry)
    """
    session = db.session
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        current_app.logger.exception(f"Storage failure during {description}; rolled back")
        raise StorageError(f"Storage failure during {description}: {e}") from e
    except Exception:
        session.rollback()
        raise
