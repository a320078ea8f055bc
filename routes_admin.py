# routes_admin.py
from functools import wraps

from flask import (
    Blueprint, render_template, request, redirect, url_for,
    flash, session, jsonify, abort, current_app
)

from catalog import find_product
from forms import (
    empty_product_form, product_to_form, product_from_form, validate_product,
    settings_from_form, STATUSES,
)
from services import get_backend, load_settings, save_settings
from assistant import generate_product_description

bp = Blueprint("admin", __name__)

SESSION_KEYS = ('is_admin', 'admin_token', 'admin_email')


def _drop_admin_session():
    for key in SESSION_KEYS:
        session.pop(key, None)


def is_authenticated():
    if not session.get('is_admin'):
        return False
    if get_backend().get_user(session.get('admin_token')) is None:
        _drop_admin_session()
        return False
    return True


def admin_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not is_authenticated():
            if request.is_json:
                abort(403)
            return redirect(url_for('admin.login'))
        return view(*args, **kwargs)
    return wrapped

# ---------- Auth ----------

@bp.route('/login', methods=['GET', 'POST'])
def login():
    if is_authenticated():
        return redirect(url_for('admin.dashboard'))

    if request.method == 'POST':
        email = request.form.get('email', '').strip()
        password = request.form.get('password', '')
        auth = get_backend().sign_in(email, password)
        if auth:
            session['is_admin'] = True
            session['admin_token'] = auth['access_token']
            session['admin_email'] = auth['email']
            current_app.logger.info(f"Admin {auth['email']} signed in")
            return redirect(url_for('admin.dashboard'))
        flash('Credenciales incorrectas o error de red.', 'error')
        return render_template('admin/login.html', email=email)

    return render_template('admin/login.html')


@bp.route('/logout', methods=['POST'])
def logout():
    get_backend().sign_out(session.get('admin_token'))
    _drop_admin_session()
    return redirect(url_for('admin.login'))

# ---------- Dashboard ----------

@bp.route('/')
@bp.route('/dashboard')
@admin_required
def dashboard():
    products = get_backend().list_products()
    stats = {
        'total': len(products),
        'active': sum(1 for p in products if p.get('status') == 'Active'),
        'out_of_stock': sum(1 for p in products if (p.get('stock') or 0) <= 0),
    }
    return render_template('admin/dashboard.html', stats=stats)

# ---------- Products ----------

@bp.route('/products')
@admin_required
def products():
    return render_template('admin/products.html', products=get_backend().list_products())


def _upload_images(form):
    """Uploads the files picked in the form and appends their URLs to the
    images field. False when any upload failed."""
    urls = []
    for image_file in request.files.getlist('image_files'):
        if not image_file or not image_file.filename:
            continue
        url = get_backend().upload_image(image_file, session.get('admin_token'))
        if url is None:
            return False
        urls.append(url)
    if urls:
        existing = form.get('images', '').strip()
        form['images'] = ", ".join(filter(None, [existing, *urls]))
    return True


def _save_product(product_id=None):
    form = request.form.to_dict()
    error = validate_product(form)
    if error is None and not _upload_images(form):
        error = 'No se pudo subir la imagen.'
    if error:
        flash(error, 'error')
        return render_template('admin/product_form.html', form=form, product_id=product_id, statuses=STATUSES)

    backend = get_backend()
    data = product_from_form(form)
    if product_id is None:
        saved = backend.add_product(data, session.get('admin_token'))
    else:
        saved = backend.update_product(product_id, data, session.get('admin_token'))

    if saved is None:
        flash('No se pudo guardar el producto. Intenta de nuevo.', 'error')
        return render_template('admin/product_form.html', form=form, product_id=product_id, statuses=STATUSES)

    flash(f"Producto \"{saved['name']}\" guardado.", 'success')
    return redirect(url_for('admin.products'))


@bp.route('/products/new', methods=['GET', 'POST'])
@admin_required
def new_product():
    if request.method == 'POST':
        return _save_product()
    return render_template('admin/product_form.html', form=empty_product_form(), product_id=None, statuses=STATUSES)


@bp.route('/products/<int:product_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_product(product_id):
    product = find_product(get_backend().list_products(), product_id)
    if product is None:
        abort(404)
    if request.method == 'POST':
        return _save_product(product_id)
    return render_template('admin/product_form.html', form=product_to_form(product),
                           product_id=product_id, statuses=STATUSES)


@bp.route('/products/<int:product_id>/delete', methods=['POST'])
@admin_required
def delete_product(product_id):
    if get_backend().delete_product(product_id, session.get('admin_token')):
        flash('Producto eliminado.', 'success')
    else:
        flash('No se pudo eliminar el producto.', 'error')
    return redirect(url_for('admin.products'))


@bp.route('/products/describe', methods=['POST'])
@admin_required
def describe_product():
    data = request.get_json(silent=True) or request.form
    name = (data.get('name') or '').strip()
    category = (data.get('category') or '').strip()
    if not name or not category:
        return jsonify({'error': 'Por favor, ingrese un nombre y categoría para el producto.'}), 400
    return jsonify({'description': generate_product_description(name, category)})

# ---------- Settings ----------

@bp.route('/settings', methods=['GET', 'POST'])
@admin_required
def store_settings():
    if request.method == 'POST':
        save_settings(settings_from_form(request.form, load_settings()))
        flash('¡Configuración guardada!', 'success')
        return redirect(url_for('admin.store_settings'))
    return render_template('admin/settings.html')
