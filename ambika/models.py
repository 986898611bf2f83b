from datetime import datetime

from werkzeug.security import generate_password_hash, check_password_hash

from ambika import db

ORDER_STATUSES = ('No Estimate', 'Pending', 'Processing', 'Completed')
ESTIMATE_STATUSES = ('Pending', 'Completed')
SUPPLIER_STATUSES = ('Active', 'Inactive')
VENDOR_STATUSES = ('active', 'inactive')
ROLES = ('admin', 'employee')


def _iso(value):
    return value.isoformat() if value else None


class TimestampMixin:
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow,
                           onupdate=datetime.utcnow)


class KeySequence(db.Model):
    """Last business-key number handed out per entity (``order``, ``estimate`` ...)."""
    __tablename__ = 'key_sequence'
    name  = db.Column(db.String(32), primary_key=True)
    value = db.Column(db.Integer, nullable=False, default=0)


class LineItemMixin:
    id           = db.Column(db.Integer, primary_key=True)
    product_code = db.Column(db.String(64), nullable=False)
    product_name = db.Column(db.String(200), nullable=False)
    category     = db.Column(db.String(100), nullable=False)
    size         = db.Column(db.String(50))
    quantity     = db.Column(db.Integer, nullable=False, default=1)
    rate         = db.Column(db.Float, nullable=False, default=0.0)
    total        = db.Column(db.Float, nullable=False, default=0.0)

    def to_dict(self):
        return {
            'product_code': self.product_code,
            'product_name': self.product_name,
            'category'    : self.category,
            'size'        : self.size,
            'quantity'    : self.quantity,
            'rate'        : self.rate,
            'total'       : self.total,
        }


class Order(TimestampMixin, db.Model):
    __tablename__ = 'order'
    id             = db.Column(db.Integer, primary_key=True)
    order_id       = db.Column(db.String(32), unique=True, nullable=False)
    date           = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    customer_name  = db.Column(db.String(200), nullable=False)
    total_amount   = db.Column(db.Float, nullable=False, default=0.0)
    advance_amount = db.Column(db.Float, nullable=False, default=0.0)
    balance_amount = db.Column(db.Float, nullable=False, default=0.0)
    status         = db.Column(db.String(32), nullable=False, default='No Estimate')
    estimate_id    = db.Column(db.String(32), nullable=True)

    items = db.relationship(
        'OrderItem',
        backref='order',
        lazy=True,
        cascade='all, delete-orphan',
        order_by='OrderItem.id',
    )

    def to_dict(self):
        return {
            'id'            : self.id,
            'order_id'      : self.order_id,
            'date'          : _iso(self.date),
            'customer_name' : self.customer_name,
            'total_amount'  : self.total_amount,
            'advance_amount': self.advance_amount,
            'balance_amount': self.balance_amount,
            'status'        : self.status,
            'estimate_id'   : self.estimate_id,
            'items'         : [i.to_dict() for i in self.items],
            'created_at'    : _iso(self.created_at),
            'updated_at'    : _iso(self.updated_at),
        }


class OrderItem(LineItemMixin, db.Model):
    __tablename__ = 'order_item'
    order_pk = db.Column(db.Integer, db.ForeignKey('order.id', ondelete='CASCADE'), nullable=False)


class Estimate(TimestampMixin, db.Model):
    __tablename__ = 'estimate'
    id            = db.Column(db.Integer, primary_key=True)
    estimate_id   = db.Column(db.String(32), unique=True, nullable=False)
    # business key of the parent order, not the integer id
    order_id      = db.Column(db.String(32), nullable=False, index=True)
    date          = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    customer_name = db.Column(db.String(200), nullable=False)
    agent_name    = db.Column(db.String(200), nullable=False, default='')
    total_items   = db.Column(db.Integer, nullable=False, default=0)
    total_amount  = db.Column(db.Float, nullable=False, default=0.0)
    status        = db.Column(db.String(32), nullable=False, default='Pending')

    items = db.relationship(
        'EstimateItem',
        backref='estimate',
        lazy=True,
        cascade='all, delete-orphan',
        order_by='EstimateItem.id',
    )

    def to_dict(self):
        return {
            'id'           : self.id,
            'estimate_id'  : self.estimate_id,
            'order_id'     : self.order_id,
            'date'         : _iso(self.date),
            'customer_name': self.customer_name,
            'agent_name'   : self.agent_name,
            'total_items'  : self.total_items,
            'total_amount' : self.total_amount,
            'status'       : self.status,
            'items'        : [i.to_dict() for i in self.items],
            'created_at'   : _iso(self.created_at),
            'updated_at'   : _iso(self.updated_at),
        }


class EstimateItem(LineItemMixin, db.Model):
    __tablename__ = 'estimate_item'
    estimate_pk = db.Column(db.Integer, db.ForeignKey('estimate.id', ondelete='CASCADE'), nullable=False)


class Agent(TimestampMixin, db.Model):
    __tablename__ = 'agent'
    id      = db.Column(db.Integer, primary_key=True)
    name    = db.Column(db.String(200), nullable=False)
    contact = db.Column(db.String(50), nullable=False)
    email   = db.Column(db.String(200))
    city    = db.Column(db.String(100))

    def to_dict(self):
        return {
            'id': self.id, 'name': self.name, 'contact': self.contact,
            'email': self.email, 'city': self.city,
            'created_at': _iso(self.created_at), 'updated_at': _iso(self.updated_at),
        }


class Customer(TimestampMixin, db.Model):
    __tablename__ = 'customer'
    id              = db.Column(db.Integer, primary_key=True)
    name            = db.Column(db.String(200), nullable=False)
    contact         = db.Column(db.String(50), nullable=False)
    customer_ref_id = db.Column(db.String(64), unique=True, nullable=False)
    agent           = db.Column(db.String(200), nullable=False)
    address         = db.Column(db.String(300), nullable=False)
    email           = db.Column(db.String(200))

    def to_dict(self):
        return {
            'id': self.id, 'name': self.name, 'contact': self.contact,
            'customer_ref_id': self.customer_ref_id, 'agent': self.agent,
            'address': self.address, 'email': self.email,
            'created_at': _iso(self.created_at), 'updated_at': _iso(self.updated_at),
        }


class AccountMixin(TimestampMixin):
    """Shared login fields for admin users and employees."""
    id       = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(100), unique=True, nullable=False)
    name     = db.Column(db.String(200))
    email    = db.Column(db.String(200))
    phone    = db.Column(db.String(50))
    role     = db.Column(db.String(32), nullable=False, default='employee')
    password = db.Column(db.String(256), nullable=False)

    def set_password(self, raw: str) -> None:
        self.password = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        return check_password_hash(self.password, raw)

    def public_dict(self):
        return {
            'id': self.id, 'username': self.username, 'name': self.name,
            'role': self.role, 'email': self.email,
        }


class User(AccountMixin, db.Model):
    __tablename__ = 'user'

    def to_dict(self):
        data = self.public_dict()
        data.update(phone=self.phone, created_at=_iso(self.created_at))
        return data


class Employee(AccountMixin, db.Model):
    __tablename__ = 'employee'
    employee_id = db.Column(db.String(32), unique=True, nullable=False)

    def to_dict(self):
        data = self.public_dict()
        data.update(
            employee_id=self.employee_id,
            phone=self.phone,
            created_at=_iso(self.created_at),
            updated_at=_iso(self.updated_at),
        )
        return data


class Product(TimestampMixin, db.Model):
    __tablename__ = 'product'
    id       = db.Column(db.Integer, primary_key=True)
    code     = db.Column(db.String(64), unique=True, nullable=False)
    name     = db.Column(db.String(200), nullable=False)
    size     = db.Column(db.String(50))
    category = db.Column(db.String(100), nullable=False)
    supplier = db.Column(db.String(200), nullable=False)
    price    = db.Column(db.Float, nullable=False, default=0.0)

    def to_dict(self):
        return {
            'id': self.id, 'code': self.code, 'name': self.name, 'size': self.size,
            'category': self.category, 'supplier': self.supplier, 'price': self.price,
            'created_at': _iso(self.created_at), 'updated_at': _iso(self.updated_at),
        }


class InventoryItem(db.Model):
    __tablename__ = 'inventory'
    __table_args__ = (db.UniqueConstraint('product_id', 'location'),)
    id           = db.Column(db.Integer, primary_key=True)
    product_id   = db.Column(db.String(64), nullable=False)
    product_code = db.Column(db.String(64))
    product_name = db.Column(db.String(200), nullable=False)
    size         = db.Column(db.String(50))
    category     = db.Column(db.String(100))
    quantity     = db.Column(db.Integer, nullable=False, default=0)
    price        = db.Column(db.Float, nullable=False, default=0.0)
    location     = db.Column(db.String(100), nullable=False, default='Main Warehouse')
    updated_at   = db.Column(db.DateTime, nullable=False, default=datetime.utcnow,
                             onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id, 'product_id': self.product_id,
            'product_code': self.product_code, 'product_name': self.product_name,
            'size': self.size, 'category': self.category, 'quantity': self.quantity,
            'price': self.price, 'location': self.location,
            'updated_at': _iso(self.updated_at),
        }


class Supplier(TimestampMixin, db.Model):
    __tablename__ = 'supplier'
    id       = db.Column(db.Integer, primary_key=True)
    name     = db.Column(db.String(200), nullable=False)
    contact  = db.Column(db.String(200), nullable=False)
    email    = db.Column(db.String(200), unique=True, nullable=False)
    phone    = db.Column(db.String(50), nullable=False)
    category = db.Column(db.String(100), nullable=False)
    status   = db.Column(db.String(16), nullable=False, default='Active')

    def to_dict(self):
        return {
            'id': self.id, 'name': self.name, 'contact': self.contact,
            'email': self.email, 'phone': self.phone, 'category': self.category,
            'status': self.status,
            'created_at': _iso(self.created_at), 'updated_at': _iso(self.updated_at),
        }


class Vendor(TimestampMixin, db.Model):
    __tablename__ = 'vendor'
    id             = db.Column(db.Integer, primary_key=True)
    name           = db.Column(db.String(200), nullable=False)
    contact_person = db.Column(db.String(200))
    email          = db.Column(db.String(200))
    phone          = db.Column(db.String(50))
    address        = db.Column(db.String(300))
    tax_id         = db.Column(db.String(64))
    status         = db.Column(db.String(16), nullable=False, default='active')
    notes          = db.Column(db.Text)

    def to_dict(self):
        return {
            'id': self.id, 'name': self.name, 'contact_person': self.contact_person,
            'email': self.email, 'phone': self.phone, 'address': self.address,
            'tax_id': self.tax_id, 'status': self.status, 'notes': self.notes,
            'created_at': _iso(self.created_at), 'updated_at': _iso(self.updated_at),
        }
