"""Tests for the jeec/v1 products endpoints."""

import pytest
from sqlalchemy import Text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from conftest import make_category, make_media
from products_manager.models.product import Product


async def _create(client, **fields):
    response = await client.post("/jeec/v1/products", json=fields)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_product_defaults(client):
    data = await _create(client, title="Phone")

    assert data["id"] > 0
    assert data["title"] == "Phone"
    assert data["status"] == "publish"
    assert data["date"]
    assert data["price"] == 0
    assert data["sale_price"] == 0
    assert data["is_on_sale"] is False
    assert data["youtube_video"] == ""
    assert data["featured_image_id"] == 0
    assert data["featured_image_url"] == ""
    assert data["categories"] == []


@pytest.mark.asyncio
async def test_create_product_with_all_fields(client):
    shoes = make_category("Shoes")
    sale = make_category("Sale")
    image_id = make_media("/media/products/boot.jpg", "/media/products/boot-150x150.jpg")

    data = await _create(
        client,
        title="Boot",
        description="<p>Waterproof</p>",
        price=120,
        sale_price=99.5,
        is_on_sale=True,
        youtube_video="https://www.youtube.com/watch?v=abc",
        featured_image_id=image_id,
        categories=[sale, shoes],
    )

    assert data["price"] == 120.0
    assert data["sale_price"] == 99.5
    assert data["is_on_sale"] is True
    assert data["youtube_video"] == "https://www.youtube.com/watch?v=abc"
    assert data["featured_image_id"] == image_id
    assert data["featured_image_url"] == "/media/products/boot-150x150.jpg"
    assert sorted(data["categories"]) == sorted([shoes, sale])
    assert data["description"] == "<p>Waterproof</p>"


@pytest.mark.asyncio
async def test_create_sanitizes_input(client):
    data = await _create(
        client,
        title="  <b>Lamp</b>\n  deluxe ",
        description='<p onclick="x()">Bright</p><script>alert(1)</script>',
        youtube_video="javascript:alert(1)",
    )

    assert data["title"] == "Lamp deluxe"
    assert "<script>" not in data["description"]
    assert "onclick" not in data["description"]
    assert "Bright" in data["description"]
    assert data["youtube_video"] == ""


@pytest.mark.asyncio
async def test_create_requires_title(client):
    response = await client.post("/jeec/v1/products", json={"price": 5})
    assert response.status_code == 400
    assert response.json()["code"] == "empty_title"

    response = await client.post("/jeec/v1/products", json={"title": "   "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_long_title_and_video_url_are_stored_whole(client):
    assert isinstance(Product.__table__.c.title.type, Text)
    assert isinstance(Product.__table__.c.youtube_video.type, Text)
    title = "Handmade " * 60
    video = "https://www.youtube.com/watch?v=" + "x" * 600

    data = await _create(client, title=title, youtube_video=video)

    assert data["title"] == title.strip()
    assert data["youtube_video"] == video


@pytest.mark.asyncio
async def test_create_rejects_negative_price(client):
    response = await client.post("/jeec/v1/products", json={"title": "Bad", "price": -1})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_sale_price_is_not_tied_to_price(client):
    data = await _create(client, title="Odd", price=10, sale_price=25, is_on_sale=True)
    assert data["sale_price"] == 25
    assert data["is_on_sale"] is True


@pytest.mark.asyncio
async def test_get_product(client):
    created = await _create(client, title="Chair", price=15)

    response = await client.get(f"/jeec/v1/products/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


@pytest.mark.asyncio
async def test_get_missing_product_returns_404(client):
    response = await client.get("/jeec/v1/products/9999")

    assert response.status_code == 404
    body = response.json()
    assert body["code"] == "not_found"
    assert body["data"] == {"status": 404}


@pytest.mark.asyncio
async def test_update_title_only_keeps_other_fields(client):
    category = make_category("Tools")
    image_id = make_media()
    created = await _create(
        client,
        title="Hammer",
        price=12.5,
        sale_price=9,
        is_on_sale=True,
        youtube_video="https://youtu.be/xyz",
        featured_image_id=image_id,
        categories=[category],
    )

    response = await client.post(f"/jeec/v1/products/{created['id']}", json={"title": "Claw hammer"})

    assert response.status_code == 200
    updated = response.json()
    assert updated["title"] == "Claw hammer"
    for field in ("price", "sale_price", "is_on_sale", "youtube_video", "featured_image_id", "categories", "date"):
        assert updated[field] == created[field]


@pytest.mark.asyncio
async def test_update_null_fields_are_ignored(client):
    created = await _create(client, title="Mug", price=4)

    response = await client.post(f"/jeec/v1/products/{created['id']}", json={"price": None, "description": None})

    assert response.status_code == 200
    assert response.json()["price"] == 4


@pytest.mark.asyncio
async def test_update_featured_image_zero_clears_it(client):
    image_id = make_media()
    created = await _create(client, title="Desk", featured_image_id=image_id)
    assert created["featured_image_url"] == "/media/products/shoe.jpg"

    response = await client.post(f"/jeec/v1/products/{created['id']}", json={"featured_image_id": 0})

    data = response.json()
    assert data["featured_image_id"] == 0
    assert data["featured_image_url"] == ""


@pytest.mark.asyncio
async def test_update_replaces_featured_image(client):
    first = make_media("/media/products/a.jpg")
    second = make_media("/media/products/b.jpg")
    created = await _create(client, title="Sofa", featured_image_id=first)

    response = await client.post(f"/jeec/v1/products/{created['id']}", json={"featured_image_id": second})

    assert response.json()["featured_image_id"] == second
    assert response.json()["featured_image_url"] == "/media/products/b.jpg"


@pytest.mark.asyncio
async def test_update_categories_replaces_whole_set(client):
    a = make_category("A")
    b = make_category("B")
    c = make_category("C")
    created = await _create(client, title="Bag", categories=[a, b])

    response = await client.post(f"/jeec/v1/products/{created['id']}", json={"categories": [c]})
    assert response.json()["categories"] == [c]

    response = await client.post(f"/jeec/v1/products/{created['id']}", json={"categories": []})
    assert response.json()["categories"] == []


@pytest.mark.asyncio
async def test_unknown_category_ids_are_ignored(client):
    known = make_category("Known")
    data = await _create(client, title="Pen", categories=[known, 4242])
    assert data["categories"] == [known]


@pytest.mark.asyncio
async def test_update_accepts_put_and_patch(client):
    created = await _create(client, title="Rug")

    put = await client.put(f"/jeec/v1/products/{created['id']}", json={"price": 30})
    patch = await client.patch(f"/jeec/v1/products/{created['id']}", json={"sale_price": 20})

    assert put.status_code == 200
    assert patch.status_code == 200
    assert patch.json()["price"] == 30
    assert patch.json()["sale_price"] == 20


@pytest.mark.asyncio
async def test_update_missing_product_returns_404(client):
    response = await client.post("/jeec/v1/products/9999", json={"title": "Ghost"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_then_get_returns_404(client):
    created = await _create(client, title="Vase")

    response = await client.delete(f"/jeec/v1/products/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"deleted": True, "id": created["id"]}

    response = await client.get(f"/jeec/v1/products/{created['id']}")
    assert response.status_code == 404

    response = await client.delete(f"/jeec/v1/products/{created['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_store_failure_returns_500(client, monkeypatch):
    created = await _create(client, title="Clock")

    def failing_commit(self):
        raise OperationalError("DELETE FROM products", {}, Exception("disk I/O error"))

    monkeypatch.setattr(Session, "commit", failing_commit)
    response = await client.delete(f"/jeec/v1/products/{created['id']}")
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.json()["code"] == "delete_failed"

    response = await client.get(f"/jeec/v1/products/{created['id']}")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_ids_are_not_reused(client):
    first = await _create(client, title="One")
    await client.delete(f"/jeec/v1/products/{first['id']}")

    second = await _create(client, title="Two")

    assert second["id"] != first["id"]


@pytest.mark.asyncio
async def test_list_pagination_headers(client):
    for i in range(5):
        await _create(client, title=f"Product {i}")

    response = await client.get("/jeec/v1/products", params={"per_page": 2, "page": 1})

    assert response.status_code == 200
    assert len(response.json()) == 2
    assert response.headers["X-WP-Total"] == "5"
    assert response.headers["X-WP-TotalPages"] == "3"

    last = await client.get("/jeec/v1/products", params={"per_page": 2, "page": 3})
    assert len(last.json()) == 1


@pytest.mark.asyncio
async def test_list_newest_first(client):
    for title in ("Old", "Middle", "New"):
        await _create(client, title=title)

    response = await client.get("/jeec/v1/products")

    assert [p["title"] for p in response.json()] == ["New", "Middle", "Old"]


@pytest.mark.asyncio
async def test_list_search_matches_title_and_description(client):
    await _create(client, title="Red kettle")
    await _create(client, title="Teapot", description="<p>Pairs with any kettle</p>")
    await _create(client, title="Spoon")

    response = await client.get("/jeec/v1/products", params={"search": "kettle"})

    assert sorted(p["title"] for p in response.json()) == ["Red kettle", "Teapot"]
    assert response.headers["X-WP-Total"] == "2"


@pytest.mark.asyncio
async def test_list_search_treats_wildcards_literally(client):
    await _create(client, title="axb")
    await _create(client, title="a_b")
    await _create(client, title="100 percent")
    await _create(client, title="100% cotton")

    underscore = await client.get("/jeec/v1/products", params={"search": "a_b"})
    percent = await client.get("/jeec/v1/products", params={"search": "100%"})

    assert [p["title"] for p in underscore.json()] == ["a_b"]
    assert [p["title"] for p in percent.json()] == ["100% cotton"]


@pytest.mark.asyncio
async def test_list_rejects_non_positive_paging(client):
    response = await client.get("/jeec/v1/products", params={"per_page": 0})
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_end_to_end_lifecycle(client):
    response = await client.post("/jeec/v1/products", json={"title": "Phone"})
    assert response.status_code == 201
    product = response.json()
    assert product["price"] == 0
    assert product["is_on_sale"] is False

    response = await client.post(f"/jeec/v1/products/{product['id']}", json={"price": 49.99})
    assert response.status_code == 200
    assert response.json()["price"] == 49.99
    assert response.json()["title"] == "Phone"

    response = await client.delete(f"/jeec/v1/products/{product['id']}")
    assert response.status_code == 200
    assert response.json() == {"deleted": True, "id": product["id"]}

    response = await client.get(f"/jeec/v1/products/{product['id']}")
    assert response.status_code == 404
