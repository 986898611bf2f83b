# ambika/auth/routes.py

import logging

from flask import Blueprint, current_app, jsonify

from ambika.errors import Unauthorized
from ambika.schemas import LoginRequest, parse
from ambika.utils import api_action
from ambika.auth.accounts import ensure_default_admin
from ambika.auth.tokens import current_account, find_account, issue_token

logger = logging.getLogger(__name__)

bp = Blueprint('auth', __name__)

BAD_LOGIN = 'Invalid username or password'


@bp.route('/login', methods=['POST'])
@api_action('log in', 'user')
def login():
    creds = parse(LoginRequest)
    account = find_account(creds.username)

    # first login on an empty database bootstraps the default admin
    if account is None and creds.username == current_app.config['DEFAULT_ADMIN_USERNAME']:
        account, _ = ensure_default_admin()

    if account is None or not account.check_password(creds.password):
        logger.info('failed login for %s', creds.username)
        raise Unauthorized(BAD_LOGIN)

    logger.info('%s logged in as %s', account.username, account.role)
    return jsonify(
        success=True,
        user=account.public_dict(),
        token=issue_token(account),
        message='Login successful',
    )


@bp.route('/verify', methods=['POST', 'GET'])
@api_action('verify', 'token')
def verify():
    return jsonify(success=True, user=current_account().public_dict())
