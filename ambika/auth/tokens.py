"""Signed bearer tokens and account lookup."""

import functools
import logging

from flask import current_app, g, request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ambika import db
from ambika.errors import Forbidden, Unauthorized
from ambika.models import Employee, User

logger = logging.getLogger(__name__)

SALT = 'ambika-auth'


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=SALT)


def issue_token(account) -> str:
    return _serializer().dumps(
        {'id': account.id, 'username': account.username, 'role': account.role}
    )


def read_token(token: str) -> dict:
    try:
        return _serializer().loads(token, max_age=current_app.config['TOKEN_MAX_AGE'])
    except SignatureExpired:
        raise Unauthorized('Token expired')
    except BadSignature:
        raise Unauthorized('Invalid token')


def bearer_token() -> str:
    header = request.headers.get('Authorization', '')
    if not header.startswith('Bearer '):
        raise Unauthorized('No token provided')
    return header[len('Bearer '):].strip()


def find_account(username: str):
    """Admin users shadow employees with the same username."""
    for model in (User, Employee):
        account = db.session.execute(
            db.select(model).where(model.username == username)
        ).scalar_one_or_none()
        if account is not None:
            return account
    return None


def account_from_claims(claims: dict):
    # the role in the token says which table issued it
    model = User if claims.get('role') == 'admin' else Employee
    account = db.session.get(model, claims.get('id'))
    if account is None or account.username != claims.get('username'):
        # an employee promoted to admin keeps living in the employee table
        account = find_account(claims.get('username', ''))
    if account is None:
        raise Unauthorized('User not found')
    return account


def current_account():
    if 'account' not in g:
        g.account = account_from_claims(read_token(bearer_token()))
    return g.account


def require_role(*roles):
    def decorator(view):
        @functools.wraps(view)
        def wrapper(*args, **kwargs):
            account = current_account()
            if roles and account.role not in roles:
                logger.warning('%s (%s) refused %s', account.username, account.role, request.path)
                raise Forbidden('Admin privileges required for this operation')
            return view(*args, **kwargs)
        return wrapper
    return decorator
