"""Request bodies accepted by the API.

Each entity has a ``*Create`` model with its required fields and an
``*Update`` model derived from it in which every field is optional, so PUT
bodies may carry any subset.  Unknown keys are ignored.
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional

from flask import request
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    create_model,
    model_validator,
)

from ambika.errors import ValidationFailed
from ambika.models import (
    ESTIMATE_STATUSES,
    ORDER_STATUSES,
    ROLES,
    SUPPLIER_STATUSES,
    VENDOR_STATUSES,
)

Text = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
OptText = Annotated[str, StringConstraints(strip_whitespace=True)]
Email = Annotated[
    str,
    StringConstraints(strip_whitespace=True, to_lower=True, pattern=r'^\S+@\S+\.\S+$'),
]
Money = Annotated[float, Field(ge=0)]
Quantity = Annotated[int, Field(ge=1)]

OrderStatus = Literal[ORDER_STATUSES]
EstimateStatus = Literal[ESTIMATE_STATUSES]
SupplierStatus = Literal[SUPPLIER_STATUSES]
VendorStatus = Literal[VENDOR_STATUSES]
Role = Literal[ROLES]


class Schema(BaseModel):
    model_config = ConfigDict(extra='ignore')


def partial(model):
    """Return a copy of ``model`` where every field is optional and defaults to None."""
    hints = model.__annotations__
    fields = {name: (Optional[hints[name]], None) for name in model.model_fields}
    return create_model(
        model.__name__.replace('Create', 'Update'),
        __base__=Schema,
        **fields,
    )


def parse(model, data=None):
    """Validate ``data`` (default: the JSON request body) against ``model``."""
    if data is None:
        data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationFailed('Request body must be a JSON object')
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailed.from_pydantic(exc) from exc


class LineItemIn(Schema):
    product_code: Text
    product_name: Text
    category: Text
    size: Optional[OptText] = None
    quantity: Quantity
    rate: Money
    total: Optional[Money] = None

    @model_validator(mode='after')
    def fill_total(self):
        if self.total is None:
            self.total = round(self.quantity * self.rate, 2)
        return self


class OrderCreate(Schema):
    order_id: Optional[Text] = None
    date: Optional[datetime] = None
    customer_name: Text
    total_amount: Optional[Money] = None
    advance_amount: Money = 0.0
    balance_amount: Optional[Money] = None
    status: OrderStatus = 'No Estimate'
    estimate_id: Optional[Text] = None
    items: List[LineItemIn] = []


OrderUpdate = partial(OrderCreate)


class EstimateCreate(Schema):
    order_id: Text
    estimate_id: Optional[Text] = None
    date: Optional[datetime] = None
    customer_name: Optional[Text] = None
    agent_name: Optional[OptText] = None
    items: Optional[List[LineItemIn]] = None


class EstimateUpdate(Schema):
    date: Optional[datetime] = None
    customer_name: Optional[Text] = None
    agent_name: Optional[OptText] = None
    status: Optional[EstimateStatus] = None
    items: Optional[Annotated[List[LineItemIn], Field(min_length=1)]] = None


class AgentCreate(Schema):
    name: Text
    contact: Text
    email: Optional[Email] = None
    city: Optional[OptText] = None


AgentUpdate = partial(AgentCreate)


class CustomerCreate(Schema):
    name: Text
    contact: Text
    customer_ref_id: Text
    agent: Text
    address: Text
    email: Optional[Email] = None


CustomerUpdate = partial(CustomerCreate)


class EmployeeCreate(Schema):
    username: Text
    password: Text
    employee_id: Optional[Text] = None
    role: Role = 'employee'
    name: Optional[OptText] = None
    email: Optional[Email] = None
    phone: Optional[OptText] = None


EmployeeUpdate = partial(EmployeeCreate)


class ProductCreate(Schema):
    code: Text
    name: Text
    size: Optional[OptText] = None
    category: Text
    supplier: Text
    price: Money


ProductUpdate = partial(ProductCreate)


class SupplierCreate(Schema):
    name: Text
    contact: Text
    email: Email
    phone: Text
    category: Text
    status: SupplierStatus = 'Active'


SupplierUpdate = partial(SupplierCreate)


class VendorCreate(Schema):
    name: Text
    contact_person: Optional[OptText] = None
    email: Optional[Email] = None
    phone: Optional[OptText] = None
    address: Optional[OptText] = None
    tax_id: Optional[OptText] = None
    status: VendorStatus = 'active'
    notes: Optional[str] = None


VendorUpdate = partial(VendorCreate)


class InventoryCreate(Schema):
    product_id: Text
    product_name: Text
    quantity: int
    product_code: Optional[OptText] = None
    size: Optional[OptText] = None
    category: Optional[OptText] = None
    price: Money = 0.0
    location: Optional[Text] = None


class InventoryUpdate(Schema):
    quantity: int
    location: Optional[Text] = None


class LoginRequest(Schema):
    username: Text
    password: Text


class RoleUpdate(Schema):
    username: Text
    newRole: Role


def changes(payload, nullable=(), exclude=()) -> dict:
    """Fields the client actually sent.

    An explicit null only clears columns listed in ``nullable``; for any
    other field it is treated as "leave unchanged".
    """
    return {
        name: value
        for name, value in payload.model_dump(exclude_unset=True, exclude=set(exclude)).items()
        if value is not None or name in nullable
    }
