from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Numeric
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash

db = SQLAlchemy()

PRODUCT_LIST_FIELDS = ("images", "colors", "sizes", "tags", "hashtags")

class Product(db.Model):
    __tablename__ = "products"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    sku = db.Column(db.String(50))
    description = db.Column(db.Text, default="")
    category = db.Column(db.String(50))
    subcategory = db.Column(db.String(50))
    price = db.Column(Numeric(10, 2), default=0)
    stock = db.Column(db.Integer, default=0)
    status = db.Column(db.String(10), default="Active")
    images = db.Column(db.JSON, default=list)
    colors = db.Column(db.JSON, default=list)
    sizes = db.Column(db.JSON, default=list)
    material = db.Column(db.String(80))
    tags = db.Column(db.JSON, default=list)
    hashtags = db.Column(db.JSON, default=list)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "sku": self.sku,
            "description": self.description or "",
            "category": self.category,
            "subcategory": self.subcategory,
            "price": float(self.price or 0),
            "stock": self.stock or 0,
            "status": self.status or "Active",
            "images": list(self.images or []),
            "colors": list(self.colors or []),
            "sizes": list(self.sizes or []),
            "material": self.material,
            "tags": list(self.tags or []),
            "hashtags": list(self.hashtags or []),
        }

class Admin(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    def set_password(self, p): self.password_hash = generate_password_hash(p)
    def check_password(self, p): return check_password_hash(self.password_hash, p)

class AdminToken(db.Model):
    """Opaque session token issued by the sql backend's sign-in."""
    token = db.Column(db.String(64), primary_key=True)
    admin_id = db.Column(db.Integer, db.ForeignKey("admin.id"), nullable=False)
    admin = db.relationship("Admin")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

class StoreSettings(db.Model):
    __tablename__ = "store_settings"
    id = db.Column(db.Integer, primary_key=True)
    store_name = db.Column(db.String(120))
    whatsapp_number = db.Column(db.String(30))
    instagram = db.Column(db.String(255))
    facebook = db.Column(db.String(255))
    tiktok = db.Column(db.String(255))
    address = db.Column(db.String(255))
    about_us = db.Column(db.Text)
    mission = db.Column(db.Text)
    vision = db.Column(db.Text)
    logo_url = db.Column(db.String(500))
    banner_url = db.Column(db.String(500))
    values = db.Column(db.JSON, default=list)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    EDITABLE = (
        "store_name", "whatsapp_number", "instagram", "facebook", "tiktok", "address",
        "about_us", "mission", "vision", "logo_url", "banner_url",
    )

    def to_dict(self):
        data = {key: getattr(self, key) or "" for key in self.EDITABLE}
        data["values"] = list(self.values or [])
        return data
