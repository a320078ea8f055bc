import logging
import click
from flask import Flask
from config import DevConfig
from models import db
from backend import make_backend, SQLBackend
from catalog import seed_products
from errors import register_error_handlers
from routes_store import bp as store_bp
from routes_admin import bp as admin_bp
from routes_assistant import bp as assistant_bp, sock


def create_app(config_object=DevConfig):
    app = Flask(__name__, static_folder="static", template_folder="templates")
    app.config.from_object(config_object)
    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO))

    db.init_app(app)
    sock.init_app(app)
    register_error_handlers(app)

    app.register_blueprint(store_bp)
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(assistant_bp, url_prefix="/assistant")

    app.extensions["store_backend"] = make_backend(app)
    register_commands(app)

    # Local tables: settings always, products/admins when PRODUCTS_BACKEND=sql
    with app.app_context():
        db.create_all()

    return app


def register_commands(app):
    @app.cli.command("seed")
    def seed():
        """Load the demo catalogue into the local products table."""
        backend = app.extensions["store_backend"]
        if not isinstance(backend, SQLBackend):
            raise click.ClickException("seed only works with PRODUCTS_BACKEND=sql")
        if backend.list_products():
            click.echo("[seed] products already present, skipped")
            return
        added = sum(1 for p in seed_products() if backend.add_product(p))
        click.echo(f"[seed] {added} products added")

    @app.cli.command("create-admin")
    @click.argument("email")
    @click.argument("password")
    def create_admin(email, password):
        """Create a local admin account (sql backend)."""
        backend = app.extensions["store_backend"]
        if not isinstance(backend, SQLBackend):
            raise click.ClickException("admins live in Supabase Auth; create them there")
        backend.create_admin(email, password)
        click.echo(f"Admin {email} created")


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=81, debug=True)
