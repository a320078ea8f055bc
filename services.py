from urllib.parse import quote
from google import genai
from flask import current_app

from catalog import INITIAL_SETTINGS
from models import db, StoreSettings
from cart import cart_total

def get_backend():
    return current_app.extensions["store_backend"]

def init_genai():
    """Client for the Gemini API, or None when no key is configured."""
    api_key = current_app.config.get("GEMINI_API_KEY")
    if not api_key:
        current_app.logger.error("GEMINI_API_KEY is not set in environment variables.")
        return None
    client = current_app.extensions.get("genai_client")
    if client is None:
        client = genai.Client(api_key=api_key)
        current_app.extensions["genai_client"] = client
    return client

# ---------- Store settings (local only) ----------

def load_settings():
    row = db.session.get(StoreSettings, 1)
    if row is None:
        return dict(INITIAL_SETTINGS)
    return row.to_dict()

def save_settings(data):
    row = db.session.get(StoreSettings, 1)
    if row is None:
        row = StoreSettings(id=1, values=INITIAL_SETTINGS["values"])
        db.session.add(row)
    for key in StoreSettings.EDITABLE:
        if key in data:
            setattr(row, key, data[key])
    if "values" in data:
        row.values = data["values"]
    db.session.commit()
    return row.to_dict()

# ---------- WhatsApp order handoff ----------

def format_price(value) -> str: return f"${float(value):.2f}"

def build_order_message(cart, settings, name, address):
    lines = [
        f"¡Hola {settings['store_name']}! 👋\n\n"
        f"Mi nombre es {name} y me gustaría hacer el siguiente pedido:\n\n"
    ]
    for item in cart:
        lines.append(f"*{item['name']}* (x{item['quantity']}) - {format_price(item['price'] * item['quantity'])}\n")
    lines.append(f"\n*Total Estimado:* {format_price(cart_total(cart))}\n")
    lines.append(f"\n*Dirección de entrega:*\n{address}\n\n¡Muchas gracias!")
    return "".join(lines)

def whatsapp_digits(number):
    return (number or "").replace("+", "")

def whatsapp_url(number, message):
    # same escaping as encodeURIComponent so the app receives the text untouched
    text = quote(message, safe="-_.!~*'()")
    return f"https://api.whatsapp.com/send?phone={whatsapp_digits(number)}&text={text}"
