"""Tests for the WhatsApp order handoff."""

from urllib.parse import urlparse, parse_qs

from cart import CART_KEY
from catalog import INITIAL_SETTINGS
from services import build_order_message, whatsapp_url, format_price


CART = [
    {"id": 1, "name": "Termo", "price": 12.5, "quantity": 2},
    {"id": 2, "name": "Coche", "price": 80.0, "quantity": 1},
]


def test_format_price():
    assert format_price(5) == "$5.00"
    assert format_price(12.345) == "$12.35"


def test_order_message_lists_items_total_and_address():
    message = build_order_message(CART, {"store_name": "Todo Baby Rio"}, "Ana", "Calle 1 #2-3")
    assert message == (
        "¡Hola Todo Baby Rio! 👋\n\n"
        "Mi nombre es Ana y me gustaría hacer el siguiente pedido:\n\n"
        "*Termo* (x2) - $25.00\n"
        "*Coche* (x1) - $80.00\n"
        "\n*Total Estimado:* $105.00\n"
        "\n*Dirección de entrega:*\nCalle 1 #2-3\n\n¡Muchas gracias!"
    )


def test_whatsapp_url_strips_plus_and_encodes_text():
    url = whatsapp_url("+573227772131", "Hola & gracias #1")
    assert url == "https://api.whatsapp.com/send?phone=573227772131&text=Hola%20%26%20gracias%20%231"


class TestCheckoutRoute:

    def _fill_cart(self, client, products):
        client.post(f"/cart/add/{products[0]['id']}", data={"quantity": "2"})
        client.post(f"/cart/add/{products[1]['id']}")

    def test_redirects_to_whatsapp_and_clears_cart(self, client, products):
        self._fill_cart(client, products)
        res = client.post("/checkout", data={"name": "Ana", "address": "Calle 1"})

        assert res.status_code == 303
        target = urlparse(res.headers["Location"])
        assert target.netloc == "api.whatsapp.com"
        query = parse_qs(target.query)
        assert query["phone"] == [INITIAL_SETTINGS["whatsapp_number"].lstrip("+")]
        text = query["text"][0]
        assert f"*{products[0]['name']}* (x2)" in text
        assert "Mi nombre es Ana" in text
        assert "Calle 1" in text

        with client.session_transaction() as sess:
            assert sess[CART_KEY] == []

    def test_empty_cart_is_rejected(self, client, products):
        res = client.post("/checkout", data={"name": "Ana", "address": "Calle 1"}, follow_redirects=True)
        assert "Tu carrito está vacío." in res.get_data(as_text=True)

    def test_missing_address_keeps_cart(self, client, products):
        self._fill_cart(client, products)
        res = client.post("/checkout", data={"name": "Ana", "address": " "})
        assert res.status_code == 200
        assert "dirección de entrega" in res.get_data(as_text=True)
        with client.session_transaction() as sess:
            assert len(sess[CART_KEY]) == 2

    def test_checkout_page_shows_total(self, client, products):
        self._fill_cart(client, products)
        page = client.get("/checkout").get_data(as_text=True)
        expected = products[0]["price"] * 2 + products[1]["price"]
        assert format_price(expected) in page
