# ambika/admin.py
"""Admin blueprint: database reset and account roles."""

from flask import Blueprint, abort, current_app, jsonify, request

from ambika import db
from ambika.models import User
from ambika.schemas import RoleUpdate, parse
from ambika.utils import api_action
from ambika.auth.accounts import clear_business_data, ensure_default_admin, update_role
from ambika.auth.tokens import require_role

bp = Blueprint('admin', __name__)


def _check_secret():
    secret = current_app.config.get('ADMIN_SECRET')
    if secret and request.headers.get('X-Admin-Secret') != secret:
        abort(403)


@bp.before_request
def before():
    _check_secret()


@bp.route('/clear-db', methods=['POST'])
@require_role('admin')
@api_action('clear', 'database')
def clear_db():
    result = clear_business_data()
    return jsonify(
        success=True,
        message='Database cleared successfully while preserving admin users',
        details=result,
    )


@bp.route('/create-admin', methods=['POST'])
@api_action('create', 'admin user')
def create_admin():
    user, created = ensure_default_admin()
    message = 'Admin user created successfully' if created else 'Admin user already exists'
    return jsonify(success=True, message=message, user=user.public_dict())


@bp.route('/create-admin', methods=['GET'])
@api_action('check', 'users')
def list_users():
    users = db.session.execute(db.select(User).order_by(User.id)).scalars()
    return jsonify(success=True, users=[u.to_dict() for u in users])


@bp.route('/update-role', methods=['POST'])
@require_role('admin')
@api_action('update', 'user role')
def change_role():
    body = parse(RoleUpdate)
    account = update_role(body.username, body.newRole)
    return jsonify(
        success=True,
        message=f'User "{account.username}" role updated to "{account.role}"',
        user=account.public_dict(),
    )
