"""Human readable business keys such as ``ORD-001`` and ``EST-014``.

Numbers come from a counter row in ``key_sequence`` that is bumped with a
single ``UPDATE ... SET value = value + 1``.  The update takes the row lock
before the new value is read back, so two requests creating orders at the
same time can never be handed the same number.  The counter is part of the
caller's transaction: if the insert that needed the key is rolled back, so is
the increment.

Keys can also be supplied by clients, so a generated key may already be
taken.  ``next_key`` keeps bumping until it finds a free one; the counter
then ends up past every explicit key it ran into.
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from ambika import db
from ambika.models import KeySequence

logger = logging.getLogger(__name__)


def format_key(prefix: str, number: int) -> str:
    return f'{prefix}-{number:03d}'


def _bump(name: str) -> int:
    result = db.session.execute(
        update(KeySequence)
        .where(KeySequence.name == name)
        .values(value=KeySequence.value + 1)
    )
    return result.rowcount


def next_number(name: str, model) -> int:
    """Increment and return the counter called ``name``.

    On first use the counter is seeded from the number of ``model`` rows
    already stored, so databases that predate the counter keep counting
    from where they were.
    """
    if not _bump(name):
        seed = db.session.scalar(select(func.count()).select_from(model)) or 0
        try:
            with db.session.begin_nested():
                db.session.add(KeySequence(name=name, value=seed + 1))
            logger.info('seeded key sequence %s at %s', name, seed + 1)
        except IntegrityError:
            # someone else created the row between our update and insert
            _bump(name)
    return db.session.scalar(select(KeySequence.value).where(KeySequence.name == name))


def _taken(key_column, key: str) -> bool:
    return db.session.scalar(
        select(func.count()).select_from(key_column.class_).where(key_column == key)
    ) > 0


def next_key(name: str, prefix: str, key_column) -> str:
    """Return the next free key for ``key_column``, e.g. ``Order.order_id``."""
    while True:
        key = format_key(prefix, next_number(name, key_column.class_))
        if not _taken(key_column, key):
            return key
        logger.info('key %s already in use, skipping', key)
