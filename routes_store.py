# routes_store.py
from urllib.parse import quote
from flask import (
    Blueprint, render_template, request, redirect, url_for,
    flash, jsonify, abort, current_app
)

from catalog import CATEGORIES, filter_products, storefront_products, find_product, related_products
from cart import (
    load_cart, save_cart, add_item, remove_item, update_quantity, clear_cart,
    cart_count, cart_total,
)
from services import (
    get_backend, load_settings, build_order_message, whatsapp_url,
    whatsapp_digits, format_price,
)

bp = Blueprint("store", __name__)


def _products():
    return storefront_products(get_backend().list_products())


def _is_ajax():
    return request.headers.get('X-Requested-With') == 'XMLHttpRequest'


def _cart_json(cart):
    return jsonify({
        'cart_items': [
            {'product_id': item['id'], 'quantity': item['quantity'],
             'subtotal': round(item['price'] * item['quantity'], 2)}
            for item in cart
        ],
        'count': cart_count(cart),
        'total': cart_total(cart),
        'cart_empty': not cart,
    })

# ---------- Public pages ----------

@bp.route("/")
def index():
    category = request.args.get("category")
    if category not in CATEGORIES:
        category = None
    query = request.args.get("q", "").strip()
    products = filter_products(_products(), category=category, query=query)
    return render_template("store/index.html", products=products,
                           selected_category=category, query=query)


@bp.route("/product/<int:product_id>")
def product(product_id):
    products = _products()
    product = find_product(products, product_id)
    if product is None:
        abort(404)
    return render_template("store/product.html", product=product,
                           related=related_products(products, product))


@bp.route("/about")
def about():
    return render_template("store/about.html")


@bp.route("/contact")
def contact():
    settings = load_settings()
    map_url = None
    key = current_app.config.get("MAPS_API_KEY")
    if key:
        map_url = ("https://www.google.com/maps/embed/v1/place"
                   f"?key={key}&q={quote(settings['address'])}")
    return render_template("store/contact.html", map_url=map_url,
                           whatsapp_link=f"https://wa.me/{whatsapp_digits(settings['whatsapp_number'])}")

# ---------- Cart ----------

@bp.route('/cart')
def view_cart():
    cart = load_cart()
    return render_template('store/cart.html', cart_items=cart, total=cart_total(cart))


@bp.route('/cart/add/<int:product_id>', methods=['POST'])
def add_to_cart(product_id):
    product = find_product(_products(), product_id)
    if product is None:
        abort(404)

    quantity = request.form.get('quantity', '1')
    quantity = max(int(quantity), 1) if quantity.isdigit() else 1

    cart = save_cart(add_item(load_cart(), product, quantity))

    if _is_ajax():
        return _cart_json(cart)
    flash(f"{quantity} x {product['name']} añadido(s) al carrito!", "success")
    return redirect(request.referrer or url_for('store.view_cart'))


@bp.route('/cart/update', methods=['POST'])
def update_cart():
    cart = load_cart()
    for field_name in request.form:
        if field_name.startswith("quantity[") and field_name.endswith("]"):
            try:
                product_id = int(field_name[9:-1])
                quantity = int(request.form[field_name])
            except ValueError:
                continue
            cart = update_quantity(cart, product_id, quantity)
    save_cart(cart)

    if _is_ajax():
        return _cart_json(cart)
    flash("¡Carrito actualizado!", "success")
    return redirect(url_for('store.view_cart'))


@bp.route('/cart/remove/<int:product_id>', methods=['POST'])
def remove_from_cart(product_id):
    cart = save_cart(remove_item(load_cart(), product_id))
    if _is_ajax():
        return _cart_json(cart)
    return redirect(url_for('store.view_cart'))


@bp.route('/cart/clear', methods=['POST'])
def empty_cart():
    cart = save_cart(clear_cart(load_cart()))
    if _is_ajax():
        return _cart_json(cart)
    return redirect(url_for('store.view_cart'))

# ---------- Checkout / WhatsApp ----------

@bp.route('/checkout', methods=['GET', 'POST'])
def checkout():
    cart = load_cart()
    if request.method == 'GET':
        return render_template('store/checkout.html', cart_items=cart, total=cart_total(cart))

    if not cart:
        flash("Tu carrito está vacío.", "error")
        return redirect(url_for('store.view_cart'))

    name = request.form.get('name', '').strip()
    address = request.form.get('address', '').strip()
    if not name or not address:
        flash("Por favor ingresa tu nombre y la dirección de entrega.", "error")
        return render_template('store/checkout.html', cart_items=cart, total=cart_total(cart),
                               name=name, address=address)

    settings = load_settings()
    message = build_order_message(cart, settings, name, address)
    url = whatsapp_url(settings['whatsapp_number'], message)
    current_app.logger.info(f"Order handoff to WhatsApp: {cart_count(cart)} items, {format_price(cart_total(cart))}")

    save_cart(clear_cart(cart))
    return redirect(url, code=303)

# ---------- Template helpers ----------

@bp.app_context_processor
def inject_store():
    cart = load_cart()
    return dict(
        settings=load_settings(),
        categories=CATEGORIES,
        cart_count=cart_count(cart),
        format_price=format_price,
    )
