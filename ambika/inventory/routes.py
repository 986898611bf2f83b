# ambika/inventory/routes.py

import logging

from flask import Blueprint, jsonify

from ambika import db
from ambika.models import InventoryItem
from ambika.schemas import InventoryCreate, InventoryUpdate, parse
from ambika.utils import api_action, get_by_ident

logger = logging.getLogger(__name__)

bp = Blueprint('inventory', __name__)

DEFAULT_LOCATION = 'Main Warehouse'


def get_item(ident: str) -> InventoryItem:
    return get_by_ident(InventoryItem, None, ident, 'Inventory item')


@bp.route('', methods=['GET'])
@api_action('get', 'inventory')
def list_inventory():
    rows = db.session.execute(
        db.select(InventoryItem).order_by(InventoryItem.product_name, InventoryItem.id)
    ).scalars()
    return jsonify(inventory=[r.to_dict() for r in rows])


@bp.route('', methods=['POST'])
@api_action('create/update', 'inventory')
def add_stock():
    """
    Receive stock for a product.
    If the product already has a row at that location its quantity is
    increased, otherwise a new row is created.
    """
    payload = parse(InventoryCreate)
    location = payload.location or DEFAULT_LOCATION

    item = db.session.execute(
        db.select(InventoryItem).where(
            InventoryItem.product_id == payload.product_id,
            InventoryItem.location == location,
        )
    ).scalar_one_or_none()

    if item is not None:
        item.quantity = (item.quantity or 0) + payload.quantity
        db.session.commit()
        logger.info('inventory %s +%s -> %s', item.product_id, payload.quantity, item.quantity)
        return jsonify(message='Inventory updated successfully', item=item.to_dict())

    item = InventoryItem(
        product_id   = payload.product_id,
        product_code = payload.product_code,
        product_name = payload.product_name,
        size         = payload.size,
        category     = payload.category,
        quantity     = payload.quantity,
        price        = payload.price,
        location     = location,
    )
    db.session.add(item)
    db.session.commit()
    return jsonify(message='Inventory item created successfully', item=item.to_dict()), 201


@bp.route('/<ident>', methods=['GET'])
@api_action('get', 'inventory item')
def view_item(ident):
    return jsonify(item=get_item(ident).to_dict())


@bp.route('/<ident>', methods=['PUT', 'PATCH'])
@api_action('update', 'inventory item', duplicate='This product is already stocked at that location')
def update_item(ident):
    item = get_item(ident)
    payload = parse(InventoryUpdate)
    item.quantity = payload.quantity
    if payload.location:
        item.location = payload.location
    db.session.commit()
    return jsonify(message='Inventory item updated successfully', item=item.to_dict())


@bp.route('/<ident>', methods=['DELETE'])
@api_action('delete', 'inventory item')
def delete_item(ident):
    item = get_item(ident)
    db.session.delete(item)
    db.session.commit()
    return jsonify(message='Inventory item deleted successfully')
