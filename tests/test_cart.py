"""Tests for the cart reducers and their session persistence."""

from cart import (
    add_item, remove_item, update_quantity, clear_cart, cart_count, cart_total, CART_KEY,
)


TERMO = {"id": 1, "name": "Termo", "price": 12.5, "category": "Para la Clínica",
         "images": ["https://img/termo.jpg"], "stock": 4}
COCHE = {"id": 2, "name": "Coche", "price": 80, "category": "Mi llegada a casa", "images": []}


class TestReducers:

    def test_add_creates_snapshot_with_quantity(self):
        cart = add_item([], TERMO, 2)
        assert cart == [{"id": 1, "name": "Termo", "price": 12.5, "category": "Para la Clínica",
                         "image": "https://img/termo.jpg", "quantity": 2}]

    def test_add_same_product_sums_quantity(self):
        cart = add_item(add_item([], TERMO, 1), TERMO, 3)
        assert len(cart) == 1
        assert cart[0]["quantity"] == 4

    def test_add_ignores_non_positive_quantity(self):
        cart = add_item([], TERMO, 1)
        assert add_item(cart, TERMO, 0) == cart
        assert add_item(cart, COCHE, -2) == cart

    def test_add_does_not_mutate_input(self):
        cart = add_item([], TERMO, 1)
        add_item(cart, TERMO, 1)
        assert cart[0]["quantity"] == 1

    def test_remove_is_idempotent(self):
        cart = add_item(add_item([], TERMO), COCHE)
        once = remove_item(cart, 1)
        assert [i["id"] for i in once] == [2]
        assert remove_item(once, 1) == once

    def test_update_sets_quantity_and_repeats_cleanly(self):
        cart = add_item([], TERMO, 1)
        once = update_quantity(cart, 1, 5)
        assert once[0]["quantity"] == 5
        assert update_quantity(once, 1, 5) == once

    def test_update_to_zero_removes(self):
        cart = add_item(add_item([], TERMO), COCHE)
        assert [i["id"] for i in update_quantity(cart, 1, 0)] == [2]
        assert [i["id"] for i in update_quantity(cart, 2, -1)] == [1]

    def test_update_unknown_product_leaves_cart(self):
        cart = add_item([], TERMO)
        assert update_quantity(cart, 99, 3) == cart

    def test_clear(self):
        assert clear_cart(add_item([], TERMO)) == []
        assert clear_cart([]) == []

    def test_count_and_total(self):
        cart = add_item(add_item([], TERMO, 2), COCHE, 1)
        assert cart_count(cart) == 3
        assert cart_total(cart) == 105.0
        assert cart_total([]) == 0


class TestCartSession:

    def test_cart_survives_between_requests(self, client, products):
        termo = next(p for p in products if p["name"] == "Termo")
        client.post(f"/cart/add/{termo['id']}", data={"quantity": "2"})
        client.post(f"/cart/add/{termo['id']}", data={"quantity": "1"})

        with client.session_transaction() as sess:
            assert sess[CART_KEY][0]["quantity"] == 3

        page = client.get("/cart").get_data(as_text=True)
        assert "Termo" in page
        assert 'value="3"' in page

    def test_ajax_add_returns_totals(self, client, products):
        termo = next(p for p in products if p["name"] == "Termo")
        res = client.post(f"/cart/add/{termo['id']}", data={"quantity": "2"},
                          headers={"X-Requested-With": "XMLHttpRequest"})
        data = res.get_json()
        assert data["count"] == 2
        assert data["total"] == round(termo["price"] * 2, 2)

    def test_add_unknown_product_is_404(self, client, products):
        assert client.post("/cart/add/9999").status_code == 404

    def test_update_form_and_zero_removes(self, client, products):
        a, b = products[0], products[1]
        client.post(f"/cart/add/{a['id']}")
        client.post(f"/cart/add/{b['id']}")
        res = client.post("/cart/update", data={f"quantity[{a['id']}]": "4", f"quantity[{b['id']}]": "0"},
                          headers={"X-Requested-With": "XMLHttpRequest"})
        data = res.get_json()
        assert [i["product_id"] for i in data["cart_items"]] == [a["id"]]
        assert data["count"] == 4

    def test_remove_and_clear(self, client, products):
        a, b = products[0], products[1]
        client.post(f"/cart/add/{a['id']}")
        client.post(f"/cart/add/{b['id']}")
        client.post(f"/cart/remove/{a['id']}")
        with client.session_transaction() as sess:
            assert [i["id"] for i in sess[CART_KEY]] == [b["id"]]
        client.post("/cart/clear")
        with client.session_transaction() as sess:
            assert sess[CART_KEY] == []

    def test_zero_quantity_adds_one(self, client, products):
        termo = next(p for p in products if p["name"] == "Termo")
        res = client.post(f"/cart/add/{termo['id']}", data={"quantity": "0"}, follow_redirects=True)
        page = res.get_data(as_text=True)
        assert "1 x Termo añadido(s) al carrito!" in page
        assert "0 x Termo" not in page
        with client.session_transaction() as sess:
            assert sess[CART_KEY][0]["quantity"] == 1
