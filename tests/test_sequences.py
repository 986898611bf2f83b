import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from ambika import create_app, db
from ambika.models import Employee, Estimate, KeySequence, Order
from ambika.sequences import format_key, next_key


def setup_app():
    app = create_app('testing')
    with app.app_context():
        db.drop_all()
        db.create_all()
    return app


def test_format_pads_to_three_digits():
    assert format_key('ORD', 1) == 'ORD-001'
    assert format_key('EST', 42) == 'EST-042'
    assert format_key('ORD', 1234) == 'ORD-1234'


def test_counter_seeds_from_existing_rows():
    app = setup_app()
    with app.app_context():
        db.session.add_all([
            Order(order_id='LEGACY-1', customer_name='A'),
            Order(order_id='LEGACY-2', customer_name='B'),
        ])
        db.session.commit()

        assert next_key('order', 'ORD', Order.order_id) == 'ORD-003'
        assert next_key('order', 'ORD', Order.order_id) == 'ORD-004'
        db.session.commit()
        assert db.session.get(KeySequence, 'order').value == 4


def test_counters_are_independent():
    app = setup_app()
    with app.app_context():
        assert next_key('order', 'ORD', Order.order_id) == 'ORD-001'
        assert next_key('estimate', 'EST', Estimate.estimate_id) == 'EST-001'
        assert next_key('order', 'ORD', Order.order_id) == 'ORD-002'


def test_rollback_returns_the_number():
    app = setup_app()
    with app.app_context():
        assert next_key('order', 'ORD', Order.order_id) == 'ORD-001'
        db.session.commit()
        assert next_key('order', 'ORD', Order.order_id) == 'ORD-002'
        db.session.rollback()
        assert next_key('order', 'ORD', Order.order_id) == 'ORD-002'


def test_generated_key_skips_explicit_keys():
    app = setup_app()
    with app.app_context():
        assert next_key('order', 'ORD', Order.order_id) == 'ORD-001'
        db.session.add_all([
            Order(order_id='ORD-001', customer_name='A'),
            Order(order_id='ORD-002', customer_name='B'),
            Order(order_id='ORD-003', customer_name='C'),
        ])
        db.session.commit()
        assert next_key('order', 'ORD', Order.order_id) == 'ORD-004'
        db.session.commit()
        assert db.session.get(KeySequence, 'order').value == 4


def test_seed_that_lands_on_a_taken_key_moves_on():
    app = setup_app()
    with app.app_context():
        # two rows, but the second number is already used
        db.session.add_all([
            Employee(username='b', employee_id='EMP-002', password='x'),
            Employee(username='c', employee_id='EMP-003', password='x'),
        ])
        db.session.commit()
        assert next_key('employee', 'EMP', Employee.employee_id) == 'EMP-004'
