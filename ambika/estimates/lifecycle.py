# ambika/estimates/lifecycle.py
"""Keep an order's ``status`` and ``estimate_id`` in step with its estimate.

Every function here stages both the estimate change and the order change on
the same session and commits once, so the pair is written together or not at
all.

    create   -> estimate Pending, order Pending + linked
    Completed -> order Completed
    delete   -> order unlinked, status "No Estimate"
"""

import logging

from ambika import db
from ambika.errors import NotFound, ValidationFailed
from ambika.models import Estimate, EstimateItem, Order
from ambika.orders.utils import build_items, items_total
from ambika.schemas import changes
from ambika.sequences import next_key
from ambika.utils import apply_fields

logger = logging.getLogger(__name__)

NO_ITEMS = 'At least one estimate item is required'


def find_order(order_key: str) -> Order | None:
    return db.session.execute(
        db.select(Order).where(Order.order_id == order_key)
    ).scalar_one_or_none()


def snapshot_items(order: Order) -> list:
    """Copy an order's lines into unsaved estimate lines."""
    return [
        EstimateItem(
            product_code=it.product_code,
            product_name=it.product_name,
            category=it.category,
            size=it.size,
            quantity=it.quantity,
            rate=it.rate,
            total=it.total,
        )
        for it in order.items
    ]


def _set_items(estimate: Estimate, items: list) -> None:
    estimate.items = items
    estimate.total_items = len(items)
    estimate.total_amount = items_total(items)


def create_estimate(payload) -> Estimate:
    """Create an estimate for ``payload.order_id`` and link the order to it.

    Lines come from the request when given, otherwise from the order.
    """
    order = find_order(payload.order_id)
    if order is None:
        raise NotFound('Order')

    if payload.items is not None:
        items = build_items(EstimateItem, payload.items)
    else:
        items = snapshot_items(order)
    if not items:
        raise ValidationFailed(NO_ITEMS)

    estimate = Estimate(
        estimate_id=payload.estimate_id or next_key('estimate', 'EST', Estimate.estimate_id),
        order_id=order.order_id,
        customer_name=payload.customer_name or order.customer_name,
        agent_name=payload.agent_name or '',
        status='Pending',
    )
    if payload.date is not None:
        estimate.date = payload.date
    _set_items(estimate, items)
    db.session.add(estimate)

    order.estimate_id = estimate.estimate_id
    order.status = 'Pending'

    db.session.commit()
    logger.info('created estimate %s for order %s', estimate.estimate_id, order.order_id)
    return estimate


def update_estimate(estimate: Estimate, payload) -> Estimate:
    """Apply a partial update; completing the estimate completes its order."""
    fields = changes(payload, exclude=('items',))
    if payload.items is not None:
        _set_items(estimate, build_items(EstimateItem, payload.items))
    apply_fields(estimate, fields)

    if fields.get('status') == 'Completed':
        order = find_order(estimate.order_id)
        if order is None:
            logger.warning('estimate %s completed but order %s is gone',
                           estimate.estimate_id, estimate.order_id)
        else:
            order.status = 'Completed'

    db.session.commit()
    return estimate


def delete_estimate(estimate: Estimate) -> None:
    """Delete ``estimate`` and reset its order to the unlinked state."""
    db.session.delete(estimate)

    order = find_order(estimate.order_id)
    if order is not None:
        order.estimate_id = None
        order.status = 'No Estimate'

    db.session.commit()
    logger.info('deleted estimate %s, order %s unlinked',
                estimate.estimate_id, estimate.order_id)
