# ambika/estimates/routes.py

from flask import Blueprint, jsonify, request

from ambika import db
from ambika.models import Estimate
from ambika.schemas import EstimateCreate, EstimateUpdate, parse
from ambika.utils import api_action, get_by_ident
from ambika.estimates import lifecycle

bp = Blueprint('estimates', __name__)

DUPLICATE = 'An estimate with this ID already exists'


def get_estimate(ident: str) -> Estimate:
    return get_by_ident(Estimate, Estimate.estimate_id, ident, 'Estimate')


@bp.route('', methods=['GET'])
@api_action('fetch', 'estimates')
def list_estimates():
    query = db.select(Estimate).order_by(Estimate.created_at.desc(), Estimate.id.desc())
    status = request.args.get('status')
    customer = request.args.get('customer')
    if status:
        query = query.where(Estimate.status == status)
    if customer:
        query = query.where(Estimate.customer_name.ilike(f'%{customer}%'))
    ests = db.session.execute(query).scalars()
    return jsonify(estimates=[e.to_dict() for e in ests])


@bp.route('', methods=['POST'])
@api_action('create', 'estimate', duplicate=DUPLICATE)
def create_estimate():
    """
    Create an estimate from an existing order.
    Body: { order_id, estimate_id?, customer_name?, agent_name?, date?, items? }
    """
    est = lifecycle.create_estimate(parse(EstimateCreate))
    return jsonify(message='Estimate created successfully', estimate=est.to_dict()), 201


@bp.route('/<ident>', methods=['GET'])
@api_action('fetch', 'estimate')
def view_estimate(ident):
    return jsonify(estimate=get_estimate(ident).to_dict())


@bp.route('/<ident>', methods=['PUT', 'PATCH'])
@api_action('update', 'estimate', duplicate=DUPLICATE)
def update_estimate(ident):
    est = get_estimate(ident)
    est = lifecycle.update_estimate(est, parse(EstimateUpdate))
    return jsonify(message='Estimate updated successfully', estimate=est.to_dict())


@bp.route('/<ident>', methods=['DELETE'])
@api_action('delete', 'estimate')
def delete_estimate(ident):
    lifecycle.delete_estimate(get_estimate(ident))
    return jsonify(message='Estimate deleted successfully')
