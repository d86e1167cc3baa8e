from conftest import auth_headers


def test_quote_prices_from_catalog(client, headers, make_book):
    book = make_book(physical_price=19.99)

    response = client.post("/api/payments/quote", headers=headers, json={
        "items": [{"book_id": book.id, "quantity": 2}],
        "coupon_code": "welcome10",
    })

    assert response.status_code == 200
    totals = response.json()["totals"]
    assert totals["subtotal"] == 39.98
    assert totals["discount"] == 4.0
    assert totals["shipping"] == 5.99
    assert totals["tax"] == 2.88
    assert totals["total"] == 44.85
    assert totals["coupon"] == "WELCOME10"


def test_unknown_coupon_lookup(client, headers):
    response = client.get("/api/payments/coupons/FREEBIE", headers=headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid coupon code"

    valid = client.get("/api/payments/coupons/summer20", headers=headers).json()
    assert valid == {"valid": True, "code": "SUMMER20", "discount": 20}


def test_empty_cart_rejected(client, headers):
    response = client.post("/api/payments/quote", headers=headers, json={"items": []})
    assert response.status_code == 400


def test_checkout_creates_order_and_decrements_stock(client, headers, make_book, session):
    paper = make_book(physical_price=30.0, physical_stock=4)
    digital = make_book(ebook_available=True, ebook_price=9.5, physical_stock=0)

    response = client.post("/api/payments/checkout", headers=headers, json={
        "items": [
            {"book_id": paper.id, "quantity": 2},
            {"book_id": digital.id, "quantity": 1, "format": "ebook"},
        ],
    })

    assert response.status_code == 201
    order = response.json()["order"]
    assert order["orderNumber"].startswith("LV-")
    assert order["subtotal"] == 69.5
    assert order["shipping"] == 0.0
    assert [i["format"] for i in order["items"]] == ["physical", "ebook"]

    session.refresh(paper)
    assert paper.physical_stock == 2

    orders = client.get("/api/payments/orders", headers=headers).json()["orders"]
    assert [o["id"] for o in orders] == [order["id"]]


def test_checkout_out_of_stock_is_409(client, headers, make_book, session):
    scarce = make_book(physical_stock=1)
    plenty = make_book(physical_stock=5)

    response = client.post("/api/payments/checkout", headers=headers, json={
        "items": [
            {"book_id": scarce.id, "quantity": 2},
            {"book_id": plenty.id, "quantity": 1},
        ],
    })

    assert response.status_code == 409
    assert response.json()["details"] == [f"Book {scarce.id} is out of stock"]
    session.refresh(plenty)
    assert plenty.physical_stock == 5


def test_unavailable_format_is_409(client, headers, make_book):
    book = make_book(audiobook_available=False)
    response = client.post("/api/payments/checkout", headers=headers, json={
        "items": [{"book_id": book.id, "format": "audiobook"}],
    })
    assert response.status_code == 409


def test_orders_are_private(client, headers, make_book, make_user):
    book = make_book()
    order_id = client.post("/api/payments/checkout", headers=headers, json={
        "items": [{"book_id": book.id}],
    }).json()["order"]["id"]

    stranger = make_user()
    response = client.get(f"/api/payments/orders/{order_id}", headers=auth_headers(stranger))
    assert response.status_code == 404

    mine = client.get(f"/api/payments/orders/{order_id}", headers=headers)
    assert mine.json()["order"]["id"] == order_id
