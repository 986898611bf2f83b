# ambika/orders/routes.py

import logging

from flask import Blueprint, current_app, jsonify, request

from ambika import db
from ambika.models import Order, OrderItem
from ambika.schemas import OrderCreate, OrderUpdate, changes, parse
from ambika.sequences import next_key
from ambika.utils import api_action, apply_fields, get_by_ident
from ambika.orders.utils import build_items, items_total, normalise_status, recompute_balance

logger = logging.getLogger(__name__)

bp = Blueprint('orders', __name__)

DUPLICATE = 'An order with this ID already exists'


def get_order(ident: str) -> Order:
    return get_by_ident(Order, Order.order_id, ident, 'Order')


@bp.route('', methods=['GET'])
@api_action('fetch', 'orders')
def list_orders():
    """
    List orders newest first.
    Optional ?status= (stored value) and ?customer= (case-insensitive substring).
    """
    query = db.select(Order).order_by(Order.created_at.desc(), Order.id.desc())
    status = request.args.get('status')
    customer = request.args.get('customer')
    if status:
        query = query.where(Order.status == status)
    if customer:
        query = query.where(Order.customer_name.ilike(f'%{customer}%'))

    allowed = current_app.config['ORDER_LIST_STATUSES']
    orders = [
        normalise_status(o.to_dict(), allowed)
        for o in db.session.execute(query).scalars()
    ]
    return jsonify(orders=orders)


@bp.route('', methods=['POST'])
@api_action('create', 'order', duplicate=DUPLICATE)
def create_order():
    payload = parse(OrderCreate)
    fields = payload.model_dump(exclude={'items'}, exclude_none=True)
    items = build_items(OrderItem, payload.items)

    if payload.total_amount is None:
        fields['total_amount'] = items_total(items)
    if not payload.order_id:
        fields['order_id'] = next_key('order', 'ORD', Order.order_id)

    order = Order(**fields, items=items)
    if payload.balance_amount is None:
        recompute_balance(order)
    db.session.add(order)
    db.session.commit()
    logger.info('created order %s for %s', order.order_id, order.customer_name)
    return jsonify(message='Order created successfully', order=order.to_dict()), 201


@bp.route('/<ident>', methods=['GET'])
@api_action('fetch', 'order')
def view_order(ident):
    return jsonify(order=get_order(ident).to_dict())


@bp.route('/<ident>', methods=['PUT', 'PATCH'])
@api_action('update', 'order', duplicate=DUPLICATE)
def update_order(ident):
    order = get_order(ident)
    payload = parse(OrderUpdate)
    fields = changes(payload, nullable=('estimate_id',), exclude=('items',))

    if payload.items is not None:
        order.items = build_items(OrderItem, payload.items)
        if 'total_amount' not in fields:
            fields['total_amount'] = items_total(order.items)
    apply_fields(order, fields)
    if 'balance_amount' not in fields and {'total_amount', 'advance_amount'} & fields.keys():
        recompute_balance(order)

    db.session.commit()
    return jsonify(message='Order updated successfully', order=order.to_dict())


@bp.route('/<ident>', methods=['DELETE'])
@api_action('delete', 'order')
def delete_order(ident):
    order = get_order(ident)
    db.session.delete(order)
    db.session.commit()
    logger.info('deleted order %s', order.order_id)
    return jsonify(message='Order deleted successfully')
