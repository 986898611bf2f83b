"""Account maintenance shared by the admin endpoints and the CLI."""

import logging

from flask import current_app
from sqlalchemy import delete

from ambika import db
from ambika.errors import NotFound
from ambika.models import (
    Agent,
    Customer,
    Estimate,
    InventoryItem,
    KeySequence,
    Order,
    Product,
    Supplier,
    User,
    Vendor,
)
from ambika.auth.tokens import find_account

logger = logging.getLogger(__name__)

CLEARED_SEQUENCES = ('order', 'estimate')


def ensure_default_admin():
    """Create the configured admin user if missing.

    Returns ``(user, created)``.
    """
    cfg = current_app.config
    user = db.session.execute(
        db.select(User).where(User.username == cfg['DEFAULT_ADMIN_USERNAME'])
    ).scalar_one_or_none()
    if user is not None:
        return user, False

    user = User(
        username=cfg['DEFAULT_ADMIN_USERNAME'],
        name='Admin User',
        role='admin',
        email=cfg['DEFAULT_ADMIN_EMAIL'],
    )
    user.set_password(cfg['DEFAULT_ADMIN_PASSWORD'])
    db.session.add(user)
    db.session.commit()
    logger.info('created default admin %s', user.username)
    return user, True


def update_role(username: str, role: str):
    account = find_account(username)
    if account is None:
        raise NotFound(f'User "{username}"')
    account.role = role
    db.session.commit()
    logger.info('role of %s set to %s', username, role)
    return account


def clear_business_data() -> dict:
    """Delete all business records and non-admin users; admins are kept.

    Order and estimate counters are reset so their numbering starts again
    at 001. Returns the number of rows removed per table.
    """
    admins = db.session.execute(
        db.select(User.id).where(User.role == 'admin')
    ).scalars().all()

    deleted = {}
    # ORM deletes so the item cascades run
    for name, model in (
        ('estimates', Estimate),
        ('orders', Order),
        ('inventory', InventoryItem),
        ('products', Product),
        ('vendors', Vendor),
        ('suppliers', Supplier),
        ('customers', Customer),
        ('agents', Agent),
    ):
        rows = db.session.execute(db.select(model)).scalars().all()
        for row in rows:
            db.session.delete(row)
        deleted[name] = len(rows)

    deleted['users'] = db.session.execute(
        delete(User).where(User.id.not_in(admins))
    ).rowcount
    # employees survive, so their counter must too
    db.session.execute(
        delete(KeySequence).where(KeySequence.name.in_(CLEARED_SEQUENCES))
    )
    db.session.commit()
    logger.info('cleared business data: %s', deleted)
    return {'deleted': deleted, 'preserved_admins': len(admins)}
