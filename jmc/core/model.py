"""
Quote model — client/vehicle data, line items and categories.

All records are frozen. The form layer holds the current category list and
swaps it for the one returned by add_item / remove_item / update_item;
nothing here keeps a reference between calls.

Two line item shapes exist:
    SimpleItem   description + amount (the amount is already the line total)
    PricedItem   description + unit_price × quantity  (canonical)
Raw numeric fields stay as typed text until the ledger parses them.
"""
from dataclasses import dataclass, field, fields, replace
from typing import List, Optional, Tuple, Union

LABOR_KEY = "mano_obra"

CAR_BRANDS = sorted([
    "Alfa Romeo", "Audi", "BAIC", "BMW", "BYD", "Changan", "Chery",
    "Chevrolet", "Citroën", "Dodge", "Fiat", "Ford", "Great Wall", "Honda",
    "Hyundai", "JAC", "Jeep", "Kia", "Land Rover", "Lexus", "Mazda",
    "Mercedes-Benz", "Mitsubishi", "Nissan", "Opel", "Peugeot", "Renault",
    "SsangYong", "Subaru", "Suzuki", "Tesla", "Toyota", "Volkswagen", "Volvo",
])


# ═══════════════════════════════════════════════════════════════════════════════
# Records
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ClientMetadata:
    client_name: str = ""
    client_phone: str = ""
    client_email: str = ""
    vehicle_brand: str = ""
    vehicle_model: str = ""
    vehicle_year: str = ""
    vehicle_mileage: str = ""
    plate: str = ""


@dataclass(frozen=True)
class SimpleItem:
    description: str = ""
    amount: str = ""


@dataclass(frozen=True)
class PricedItem:
    description: str = ""
    unit_price: str = ""
    quantity: str = ""


LineItem = Union[SimpleItem, PricedItem]


@dataclass(frozen=True)
class Category:
    key: str
    label: str
    items: Tuple[LineItem, ...] = field(default_factory=tuple)

    @property
    def is_labor(self) -> bool:
        return self.key == LABOR_KEY


def replace_field(meta: ClientMetadata, name: str, value: str) -> ClientMetadata:
    """Return a copy of `meta` with one field swapped."""
    if name not in _CLIENT_FIELDS:
        raise KeyError(f"Unknown client field: {name}")
    return replace(meta, **{name: value})


def default_categories() -> List[Category]:
    """Parts, labor, supplies — one blank row each."""
    return [
        Category("repuestos", "Repuestos", (PricedItem(),)),
        Category(LABOR_KEY, "Mano de obra", (PricedItem(),)),
        Category("insumos", "Insumos", (PricedItem(),)),
    ]


# ═══════════════════════════════════════════════════════════════════════════════
# Edit operations, each returns a new list
# ═══════════════════════════════════════════════════════════════════════════════

def _blank_like(cat: Category) -> LineItem:
    if cat.items and all(isinstance(i, SimpleItem) for i in cat.items):
        return SimpleItem()
    return PricedItem()


def _map_category(categories, key, fn):
    return [fn(cat) if cat.key == key else cat for cat in categories]


def add_item(categories: List[Category], key: str) -> List[Category]:
    return _map_category(
        categories, key,
        lambda cat: replace(cat, items=cat.items + (_blank_like(cat),)))


def remove_item(categories: List[Category], key: str, index: int) -> List[Category]:
    """Drop one row. The last row is replaced by a blank one instead."""
    def _remove(cat):
        items = tuple(it for i, it in enumerate(cat.items) if i != index)
        return replace(cat, items=items or (_blank_like(cat),))
    return _map_category(categories, key, _remove)


def update_item(categories: List[Category], key: str, index: int,
                name: str, value: str) -> List[Category]:
    def _update(cat):
        items = list(cat.items)
        item = items[index]
        if name not in {f.name for f in fields(item)}:
            raise KeyError(f"{type(item).__name__} has no field {name}")
        items[index] = replace(item, **{name: value})
        return replace(cat, items=tuple(items))
    return _map_category(categories, key, _update)


# ═══════════════════════════════════════════════════════════════════════════════
# JSON payloads (camelCase from the browser, snake_case from scripts)
# ═══════════════════════════════════════════════════════════════════════════════

_CLIENT_FIELDS = [f.name for f in fields(ClientMetadata)]


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.title() for p in rest)


def _text(data: dict, name: str) -> str:
    v = data.get(name)
    if v is None:
        v = data.get(_camel(name))
    return "" if v is None else str(v)


def client_from_payload(data: Optional[dict]) -> ClientMetadata:
    if data is None:
        return ClientMetadata()
    if not isinstance(data, dict):
        raise ValueError("client must be an object")
    return ClientMetadata(**{n: _text(data, n) for n in _CLIENT_FIELDS})


def item_from_payload(data) -> LineItem:
    if not isinstance(data, dict):
        raise ValueError("line item must be an object")
    priced_keys = ("unit_price", "unitPrice", "quantity")
    if "amount" in data and not any(k in data for k in priced_keys):
        return SimpleItem(_text(data, "description"), _text(data, "amount"))
    return PricedItem(_text(data, "description"),
                      _text(data, "unit_price"), _text(data, "quantity"))


def categories_from_payload(data) -> List[Category]:
    """Build the category list. Missing/empty list → default categories."""
    if not data:
        return default_categories()
    if not isinstance(data, list):
        raise ValueError("categories must be a list")
    out = []
    seen = set()
    for idx, raw in enumerate(data):
        if not isinstance(raw, dict):
            raise ValueError(f"category #{idx + 1} must be an object")
        key = raw.get("key")
        if not key:
            raise ValueError(f"category #{idx + 1} has no key")
        if str(key) in seen:
            raise ValueError(f"duplicate category key: {key}")
        seen.add(str(key))
        items_raw = raw.get("items") or []
        if not isinstance(items_raw, list):
            raise ValueError(f"category {key}: items must be a list")
        items = tuple(item_from_payload(i) for i in items_raw) or (PricedItem(),)
        out.append(Category(str(key), str(raw.get("label") or key), items))
    return out


def item_to_payload(item: LineItem) -> dict:
    if isinstance(item, SimpleItem):
        return {"description": item.description, "amount": item.amount}
    return {"description": item.description, "unitPrice": item.unit_price,
            "quantity": item.quantity}


def categories_to_payload(categories: List[Category]) -> list:
    return [{"key": c.key, "label": c.label,
             "items": [item_to_payload(i) for i in c.items]}
            for c in categories]


def client_to_payload(meta: ClientMetadata) -> dict:
    return {_camel(n): getattr(meta, n) for n in _CLIENT_FIELDS}
