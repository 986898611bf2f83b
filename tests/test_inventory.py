import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from ambika import create_app, db


def setup_app():
    app = create_app('testing')
    with app.app_context():
        db.drop_all()
        db.create_all()
    return app


STOCK = {'product_id': '17', 'product_code': 'A1', 'product_name': 'Widget',
         'category': 'Tools', 'quantity': 5, 'price': 12.5}


def test_receiving_stock_twice_adds_up():
    client = setup_app().test_client()
    resp = client.post('/api/inventory', json=STOCK)
    assert resp.status_code == 201
    item = resp.get_json()['item']
    assert item['location'] == 'Main Warehouse'
    assert item['quantity'] == 5

    resp = client.post('/api/inventory', json=dict(STOCK, quantity=3))
    assert resp.status_code == 200
    assert resp.get_json()['item']['quantity'] == 8
    assert len(client.get('/api/inventory').get_json()['inventory']) == 1


def test_locations_are_tracked_separately():
    client = setup_app().test_client()
    client.post('/api/inventory', json=STOCK)
    client.post('/api/inventory', json=dict(STOCK, location='Shop Floor', quantity=1))
    rows = client.get('/api/inventory').get_json()['inventory']
    assert sorted((r['location'], r['quantity']) for r in rows) == [
        ('Main Warehouse', 5), ('Shop Floor', 1)]


def test_required_fields():
    client = setup_app().test_client()
    resp = client.post('/api/inventory', json={'product_id': '17', 'quantity': 1})
    assert resp.status_code == 400
    assert 'product_name' in resp.get_json()['error']


def test_set_quantity_and_delete():
    client = setup_app().test_client()
    item = client.post('/api/inventory', json=STOCK).get_json()['item']

    resp = client.put(f"/api/inventory/{item['id']}", json={'location': 'Back Room'})
    assert resp.status_code == 400

    resp = client.put(f"/api/inventory/{item['id']}", json={'quantity': 40, 'location': 'Back Room'})
    assert resp.get_json()['item']['quantity'] == 40
    assert resp.get_json()['item']['location'] == 'Back Room'

    assert client.delete(f"/api/inventory/{item['id']}").status_code == 200
    resp = client.get(f"/api/inventory/{item['id']}")
    assert resp.status_code == 404
    assert resp.get_json() == {'error': 'Inventory item not found'}


def test_non_numeric_id_is_not_found():
    client = setup_app().test_client()
    assert client.get('/api/inventory/abc').status_code == 404
