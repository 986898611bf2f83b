"""Order helpers used by the order and estimate blueprints."""


def build_items(model, items) -> list:
    """Turn validated line items into unsaved ``model`` rows."""
    return [model(**it.model_dump()) for it in items]


def items_total(items) -> float:
    return round(sum(it.total for it in items), 2)


def recompute_balance(order) -> None:
    order.balance_amount = max(round(order.total_amount - order.advance_amount, 2), 0.0)


def normalise_status(order: dict, allowed) -> dict:
    """Show any status outside ``allowed`` as Pending.

    Only the serialised copy is touched; the stored row keeps its value.
    """
    if order.get('status') not in allowed:
        order['status'] = 'Pending'
    return order
