"""Product table, image bucket and admin auth.

``SupabaseBackend`` talks to the hosted project through the supabase client;
``SQLBackend`` keeps the same contract on the local database for development
and tests. Failures are logged and come back as an empty/None result so the
pages keep rendering with whatever they had.
"""
import os
import secrets
import time

from flask import current_app, url_for
from werkzeug.utils import secure_filename

from models import db, Product, Admin, AdminToken, PRODUCT_LIST_FIELDS

PRODUCT_FIELDS = (
    "name", "sku", "description", "category", "subcategory", "price", "stock",
    "status", "material", *PRODUCT_LIST_FIELDS,
)


def clean_product(data):
    """Only the columns the products table knows about, never the id."""
    return {k: data[k] for k in PRODUCT_FIELDS if k in data}


def unique_image_name(filename):
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
    return f"{int(time.time() * 1000)}_{secrets.token_hex(5)}.{ext}"


class SupabaseBackend:
    table = "products"

    def __init__(self, client, bucket="product-images", client_factory=None):
        self.client = client
        self.bucket = bucket
        # client_factory(access_token=None) -> a new client, sending the
        # admin's JWT instead of the anon key when one is given
        self.client_factory = client_factory

    @classmethod
    def from_config(cls, config):
        from supabase import create_client, ClientOptions

        url, key = config["SUPABASE_URL"], config["SUPABASE_KEY"]

        def client_factory(access_token=None):
            headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}
            return create_client(url, key, options=ClientOptions(headers=headers))

        return cls(client_factory(), bucket=config.get("SUPABASE_BUCKET", "product-images"),
                   client_factory=client_factory)

    def _client_for(self, access_token):
        """Writes go out as the signed-in admin so row level security applies to them."""
        if access_token and self.client_factory is not None:
            return self.client_factory(access_token)
        return self.client

    # ---------- Products ----------

    def list_products(self):
        try:
            res = self.client.table(self.table).select("*").order("id", desc=False).execute()
        except Exception as e:
            current_app.logger.exception(f"Error fetching products: {e}")
            return []
        return res.data or []

    def add_product(self, data, access_token=None):
        try:
            res = self._client_for(access_token).table(self.table).insert(clean_product(data)).execute()
        except Exception as e:
            current_app.logger.exception(f"Error adding product: {e}")
            return None
        return res.data[0] if res.data else None

    def update_product(self, product_id, data, access_token=None):
        try:
            res = (
                self._client_for(access_token).table(self.table)
                .update(clean_product(data))
                .eq("id", product_id)
                .execute()
            )
        except Exception as e:
            current_app.logger.exception(f"Error updating product {product_id}: {e}")
            return None
        return res.data[0] if res.data else None

    def delete_product(self, product_id, access_token=None):
        try:
            self._client_for(access_token).table(self.table).delete().eq("id", product_id).execute()
        except Exception as e:
            current_app.logger.exception(f"Error deleting product {product_id}: {e}")
            return False
        return True

    # ---------- Storage ----------

    def upload_image(self, file, access_token=None):
        path = f"public/{unique_image_name(file.filename or '')}"
        bucket = self._client_for(access_token).storage.from_(self.bucket)
        try:
            bucket.upload(
                path=path,
                file=file.read(),
                file_options={"content-type": file.mimetype or "application/octet-stream", "upsert": "false"},
            )
        except Exception as e:
            current_app.logger.exception(f"Error uploading image: {e}")
            return None
        public_url = bucket.get_public_url(path)
        if not public_url:
            current_app.logger.error("Could not get public URL for uploaded image.")
            return None
        return public_url

    # ---------- Auth ----------

    def sign_in(self, email, password):
        # a throwaway client, so the shared one never holds an admin session
        auth_client = self.client_factory() if self.client_factory is not None else self.client
        try:
            res = auth_client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            current_app.logger.error(f"Login error: {e}")
            return None
        if not res.session:
            return None
        return {
            "access_token": res.session.access_token,
            "refresh_token": res.session.refresh_token,
            "email": res.user.email if res.user else email,
        }

    def sign_out(self, access_token):
        if not access_token:
            return
        try:
            self.client.auth.admin.sign_out(access_token)
        except Exception as e:
            current_app.logger.error(f"Logout error: {e}")

    def get_user(self, access_token):
        if not access_token:
            return None
        try:
            res = self.client.auth.get_user(access_token)
        except Exception as e:
            current_app.logger.error(f"Error getting session: {e}")
            return None
        return res.user.email if res and res.user else None


class SQLBackend:

    def __init__(self, upload_folder="uploads"):
        self.upload_folder = upload_folder

    # ---------- Products ----------

    def list_products(self):
        try:
            return [p.to_dict() for p in Product.query.order_by(Product.id).all()]
        except Exception as e:
            current_app.logger.exception(f"Error fetching products: {e}")
            return []

    def add_product(self, data, access_token=None):
        product = Product(**clean_product(data))
        try:
            db.session.add(product)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.exception(f"Error adding product: {e}")
            return None
        return product.to_dict()

    def update_product(self, product_id, data, access_token=None):
        product = db.session.get(Product, product_id)
        if product is None:
            current_app.logger.error(f"Error updating product {product_id}: not found")
            return None
        for key, value in clean_product(data).items():
            setattr(product, key, value)
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.exception(f"Error updating product {product_id}: {e}")
            return None
        return product.to_dict()

    def delete_product(self, product_id, access_token=None):
        product = db.session.get(Product, product_id)
        if product is None:
            current_app.logger.error(f"Error deleting product {product_id}: not found")
            return False
        try:
            db.session.delete(product)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.exception(f"Error deleting product {product_id}: {e}")
            return False
        return True

    # ---------- Storage ----------

    def _folder(self):
        folder = os.path.join(current_app.static_folder, self.upload_folder)
        os.makedirs(folder, exist_ok=True)
        return folder

    def upload_image(self, file, access_token=None):
        filename = secure_filename(unique_image_name(file.filename or ""))
        try:
            file.save(os.path.join(self._folder(), filename))
        except OSError as e:
            current_app.logger.exception(f"Error uploading image: {e}")
            return None
        return url_for("static", filename=f"{self.upload_folder}/{filename}")

    # ---------- Auth ----------

    def sign_in(self, email, password):
        admin = Admin.query.filter_by(email=(email or "").strip().lower()).first()
        if not admin or not admin.check_password(password or ""):
            current_app.logger.error("Login error: invalid credentials")
            return None
        token = AdminToken(token=secrets.token_hex(32), admin=admin)
        db.session.add(token)
        db.session.commit()
        return {"access_token": token.token, "refresh_token": None, "email": admin.email}

    def sign_out(self, access_token):
        token = db.session.get(AdminToken, access_token) if access_token else None
        if token is not None:
            db.session.delete(token)
            db.session.commit()

    def get_user(self, access_token):
        token = db.session.get(AdminToken, access_token) if access_token else None
        return token.admin.email if token else None

    def create_admin(self, email, password):
        admin = Admin(email=email.strip().lower())
        admin.set_password(password)
        db.session.add(admin)
        db.session.commit()
        return admin


def make_backend(app):
    kind = app.config.get("PRODUCTS_BACKEND", "supabase")
    if kind == "sql":
        return SQLBackend(upload_folder=app.config.get("UPLOAD_FOLDER", "uploads"))
    if kind == "supabase":
        return SupabaseBackend.from_config(app.config)
    raise ValueError(f"Unknown PRODUCTS_BACKEND: {kind}")
