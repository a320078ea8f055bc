"""Cart reducers.

The cart is a list of item dicts (a product snapshot plus ``quantity``) kept in
the signed session cookie, so it lives on the shopper's browser and survives
reloads. Every reducer returns a new list and leaves its input untouched.
"""
from flask import session

CART_KEY = "todo-baby-cart"


def _snapshot(product, quantity):
    images = product.get("images") or []
    return {
        "id": product["id"],
        "name": product.get("name", ""),
        "price": float(product.get("price") or 0),
        "category": product.get("category"),
        "image": images[0] if images else None,
        "quantity": quantity,
    }


def add_item(cart, product, quantity=1):
    if quantity < 1:
        return list(cart)
    if any(item["id"] == product["id"] for item in cart):
        return [
            {**item, "quantity": item["quantity"] + quantity} if item["id"] == product["id"] else item
            for item in cart
        ]
    return [*cart, _snapshot(product, quantity)]


def remove_item(cart, product_id):
    return [item for item in cart if item["id"] != product_id]


def update_quantity(cart, product_id, quantity):
    if quantity <= 0:
        return remove_item(cart, product_id)
    return [{**item, "quantity": quantity} if item["id"] == product_id else item for item in cart]


def clear_cart(cart):
    return []


def cart_count(cart):
    return sum(item["quantity"] for item in cart)


def cart_total(cart):
    return round(sum(item["price"] * item["quantity"] for item in cart), 2)


def load_cart():
    return list(session.get(CART_KEY, []))


def save_cart(cart):
    session[CART_KEY] = cart
    session.modified = True
    return cart
