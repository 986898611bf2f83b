"""Helpers shared by the API blueprints."""

import functools
import logging

from flask import jsonify
from sqlalchemy.exc import IntegrityError

from ambika import db
from ambika.errors import APIError, DuplicateKey, NotFound

logger = logging.getLogger(__name__)


def get_by_ident(model, key_column, ident: str, entity: str):
    """Look a row up by integer id first, then by its business key.

    ``key_column`` may be None for entities that only have the integer id.
    """
    obj = None
    if ident.isdigit():
        obj = db.session.get(model, int(ident))
    if obj is None and key_column is not None:
        obj = db.session.execute(
            db.select(model).where(key_column == ident)
        ).scalar_one_or_none()
    if obj is None:
        raise NotFound(entity)
    return obj


def _is_unique_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return 'unique' in message or 'duplicate' in message


def api_action(verb: str, entity: str, duplicate: str | None = None):
    """Wrap a view so failures come back as JSON.

    ``APIError`` passes through to the registered handlers, unique constraint
    violations become a 400 with ``duplicate`` as the message and anything
    else is logged and reported as ``Failed to <verb> <entity>``.
    """
    def decorator(view):
        @functools.wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except APIError:
                raise
            except IntegrityError as exc:
                db.session.rollback()
                if duplicate and _is_unique_violation(exc):
                    logger.info('duplicate %s rejected: %s', entity, exc.orig)
                    raise DuplicateKey(duplicate) from exc
                logger.exception('error trying to %s %s', verb, entity)
                return jsonify(error=f'Failed to {verb} {entity}'), 500
            except Exception:
                db.session.rollback()
                logger.exception('error trying to %s %s', verb, entity)
                return jsonify(error=f'Failed to {verb} {entity}'), 500
        return wrapper
    return decorator


def apply_fields(obj, fields: dict) -> None:
    for name, value in fields.items():
        setattr(obj, name, value)
