# ambika/resources.py
"""Plain CRUD endpoints for the single-table entities.

Agents, customers, employees, products, suppliers and vendors all behave the
same way: list newest first, create, fetch, partial update and delete by
integer id, with a unique-key message when a create or update collides.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from flask import Blueprint, jsonify

from ambika import db
from ambika.models import Agent, Customer, Employee, Product, Supplier, Vendor
from ambika import schemas
from ambika.schemas import changes, parse
from ambika.sequences import next_key
from ambika.utils import api_action, apply_fields, get_by_ident

logger = logging.getLogger(__name__)


@dataclass
class Resource:
    name: str                 # singular, used as the JSON key ("agent")
    plural: str               # list JSON key and url prefix ("agents")
    model: type
    create_schema: type
    update_schema: type
    duplicate: Optional[str] = None
    key_column: object = None
    # hook(obj, fields) run before a create/update is applied
    before_save: Optional[Callable] = None

    @property
    def entity(self) -> str:
        return self.name.capitalize()


def make_blueprint(res: Resource) -> Blueprint:
    bp = Blueprint(res.plural, __name__)
    model = res.model

    def fetch(ident):
        return get_by_ident(model, res.key_column, ident, res.entity)

    @bp.route('', methods=['GET'])
    @api_action('fetch', res.plural)
    def list_all():
        rows = db.session.execute(
            db.select(model).order_by(model.created_at.desc(), model.id.desc())
        ).scalars()
        return jsonify({res.plural: [r.to_dict() for r in rows]})

    @bp.route('', methods=['POST'])
    @api_action('create', res.name, duplicate=res.duplicate)
    def create():
        fields = parse(res.create_schema).model_dump(exclude_none=True)
        obj = model()
        if res.before_save:
            res.before_save(obj, fields)
        apply_fields(obj, fields)
        db.session.add(obj)
        db.session.commit()
        logger.info('created %s %s', res.name, obj.id)
        return jsonify({'message': f'{res.entity} created successfully', res.name: obj.to_dict()}), 201

    @bp.route('/<ident>', methods=['GET'])
    @api_action('fetch', res.name)
    def view(ident):
        return jsonify({res.name: fetch(ident).to_dict()})

    @bp.route('/<ident>', methods=['PUT', 'PATCH'])
    @api_action('update', res.name, duplicate=res.duplicate)
    def update(ident):
        obj = fetch(ident)
        fields = changes(parse(res.update_schema))
        if res.before_save:
            res.before_save(obj, fields)
        apply_fields(obj, fields)
        db.session.commit()
        return jsonify({'message': f'{res.entity} updated successfully', res.name: obj.to_dict()})

    @bp.route('/<ident>', methods=['DELETE'])
    @api_action('delete', res.name)
    def delete(ident):
        obj = fetch(ident)
        db.session.delete(obj)
        db.session.commit()
        logger.info('deleted %s %s', res.name, ident)
        return jsonify(message=f'{res.entity} deleted successfully')

    return bp


def _employee_before_save(emp: Employee, fields: dict) -> None:
    # never store the plain password
    raw = fields.pop('password', None)
    if raw:
        emp.set_password(raw)
    if emp.employee_id is None and not fields.get('employee_id'):
        fields['employee_id'] = next_key('employee', 'EMP', Employee.employee_id)


RESOURCES = [
    Resource('agent', 'agents', Agent, schemas.AgentCreate, schemas.AgentUpdate),
    Resource('customer', 'customers', Customer, schemas.CustomerCreate, schemas.CustomerUpdate,
             duplicate='A customer with this ID already exists',
             key_column=Customer.customer_ref_id),
    Resource('employee', 'employees', Employee, schemas.EmployeeCreate, schemas.EmployeeUpdate,
             duplicate='An employee with this username or ID already exists',
             key_column=Employee.employee_id,
             before_save=_employee_before_save),
    Resource('product', 'products', Product, schemas.ProductCreate, schemas.ProductUpdate,
             duplicate='A product with this code already exists',
             key_column=Product.code),
    Resource('supplier', 'suppliers', Supplier, schemas.SupplierCreate, schemas.SupplierUpdate,
             duplicate='A supplier with this email already exists'),
    Resource('vendor', 'vendors', Vendor, schemas.VendorCreate, schemas.VendorUpdate),
]

blueprints = {res.plural: make_blueprint(res) for res in RESOURCES}
