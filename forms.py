"""Translation between admin form fields and product/settings records."""
import math

from catalog import CATEGORIES
from models import PRODUCT_LIST_FIELDS, StoreSettings

TEXT_FIELDS = ("name", "sku", "description", "category", "subcategory", "material")
STATUSES = ("Active", "Inactive")


def split_list(text):
    return [part.strip() for part in (text or "").split(",") if part.strip()]


def join_list(values):
    return ", ".join(values or [])


def empty_product_form():
    form = {field: "" for field in TEXT_FIELDS}
    form.update({field: "" for field in PRODUCT_LIST_FIELDS})
    form.update(category=CATEGORIES[0], price="0", stock="0", status="Active")
    return form


def product_to_form(product):
    form = empty_product_form()
    for field in TEXT_FIELDS:
        form[field] = product.get(field) or ""
    for field in PRODUCT_LIST_FIELDS:
        form[field] = join_list(product.get(field))
    form["price"] = str(product.get("price", 0))
    form["stock"] = str(product.get("stock", 0))
    form["status"] = product.get("status") or "Active"
    return form


def _parse_price(value):
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if math.isfinite(price) else None


def validate_product(form):
    """Message to show inline, or None when the form can be saved."""
    if not (form.get("name") or "").strip():
        return "El nombre del producto es obligatorio."
    price = _parse_price((form.get("price") or "").strip())
    if price is None or price < 0:
        return "Ingresa un precio válido."
    return None


def product_from_form(form):
    data = {field: (form.get(field) or "").strip() for field in TEXT_FIELDS}
    for field in PRODUCT_LIST_FIELDS:
        data[field] = split_list(form.get(field))
    data["price"] = _parse_price(form.get("price")) or 0.0
    try:
        data["stock"] = int(form.get("stock") or 0)
    except ValueError:
        data["stock"] = 0
    status = form.get("status")
    data["status"] = status if status in STATUSES else "Active"
    return data


def settings_from_form(form, current):
    updated = dict(current)
    for key in StoreSettings.EDITABLE:
        if key in form:
            updated[key] = form.get(key, "").strip()
    return updated
