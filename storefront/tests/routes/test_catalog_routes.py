from storefront.db.models import BrandOrm, CategoryOrm, ProductOrm


def _product(db, category, slug, **kwargs):
    p = ProductOrm(title=slug.title(), slug=slug, price=5.0, category_id=category.id, **kwargs)
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


# --- Categories ---

def test_create_and_list_categories(admin_client, db_session):
    r = admin_client.post("/api/categories", json={"name": "Garden Tools", "sortOrder": 2})
    assert r.status_code == 201
    assert r.json()["slug"] == "garden-tools"
    assert r.json()["sortOrder"] == 2

    admin_client.post("/api/categories", json={"name": "Bath", "sortOrder": 1})
    names = [c["name"] for c in admin_client.get("/api/categories").json()]
    assert names == ["Bath", "Garden Tools"]


def test_create_category_duplicate_slug_conflicts(admin_client, category):
    r = admin_client.post("/api/categories", json={"name": "Other", "slug": "Kitchen"})
    assert r.status_code == 409
    assert r.json() == {"error": "Category slug already exists"}


def test_create_category_validation_error_shape(admin_client):
    r = admin_client.post("/api/categories", json={})
    assert r.status_code == 400
    assert "error" in r.json()


def test_update_category(admin_client, category):
    r = admin_client.put(f"/api/categories/{category.id}", json={"name": "Cookware", "sortOrder": 4})
    assert r.status_code == 200
    assert r.json()["slug"] == "cookware"


def test_delete_category_with_products_conflicts(admin_client, db_session, category):
    _product(db_session, category, "pan")
    r = admin_client.delete(f"/api/categories/{category.id}")
    assert r.status_code == 409

    db_session.query(ProductOrm).delete()
    db_session.commit()
    assert admin_client.delete(f"/api/categories/{category.id}").json() == {"success": True}
    assert db_session.query(CategoryOrm).count() == 0


def test_navigation(client, category):
    r = client.get("/api/navigation")
    assert r.status_code == 200
    assert r.json() == [{"name": "Kitchen", "href": "/category/kitchen"}]


def test_category_write_requires_admin(client):
    r = client.post("/api/categories", json={"name": "X"})
    assert r.status_code == 401


# --- Brands ---

def test_brand_crud(admin_client):
    r = admin_client.post("/api/brands", json={"name": "North Wind"})
    assert r.status_code == 201
    brand_id = r.json()["id"]
    assert r.json()["slug"] == "north-wind"

    assert admin_client.get(f"/api/brands/{brand_id}").json()["name"] == "North Wind"
    r = admin_client.put(f"/api/brands/{brand_id}", json={"name": "South Wind"})
    assert r.json()["slug"] == "south-wind"
    assert admin_client.get("/api/brands/missing").status_code == 404


def test_delete_brand_detaches_products(admin_client, db_session, category, brand):
    product = _product(db_session, category, "kettle", brand_id=brand.id)
    r = admin_client.delete(f"/api/brands/{brand.id}")
    assert r.status_code == 200
    db_session.expire_all()
    assert db_session.query(BrandOrm).count() == 0
    assert db_session.query(ProductOrm).filter_by(id=product.id).one().brand_id is None


# --- Products ---

def test_list_products_filters(client, db_session, category, brand):
    _product(db_session, category, "mug", brand_id=brand.id, featured=True)
    _product(db_session, category, "bowl")
    _product(db_session, category, "hidden", active=False)

    slugs = {p["slug"] for p in client.get("/api/products").json()}
    assert slugs == {"mug", "bowl"}
    assert [p["slug"] for p in client.get("/api/products", params={"brandId": brand.id}).json()] == ["mug"]
    assert [p["slug"] for p in client.get("/api/products", params={"featured": "true"}).json()] == ["mug"]


def test_get_product_by_slug(client, db_session, category):
    _product(db_session, category, "mug", images='["a.jpg"]', bullet_points='["Big"]')
    _product(db_session, category, "hidden", active=False)

    body = client.get("/api/products/mug").json()
    assert body["images"] == ["a.jpg"]
    assert body["bulletPoints"] == ["Big"]
    assert body["categoryId"] == category.id
    assert client.get("/api/products/hidden").status_code == 404
    assert client.get("/api/products/nothing").json() == {"error": "Product not found"}


def test_create_product(admin_client, category):
    payload = {
        "title": "Cast Iron Pan",
        "price": 0,
        "categoryId": category.id,
        "images": ["https://img.example/pan.jpg"],
        "bulletPoints": ["Heavy"],
    }
    r = admin_client.post("/api/products", json=payload)
    assert r.status_code == 201
    body = r.json()
    assert body["slug"] == "cast-iron-pan"
    assert body["mainImage"] == "https://img.example/pan.jpg"
    assert body["price"] == 0

    again = admin_client.post("/api/products", json=payload)
    assert again.json()["slug"] == "cast-iron-pan-1"

    explicit = admin_client.post("/api/products", json={**payload, "slug": "cast-iron-pan"})
    assert explicit.status_code == 409


def test_create_product_rejects_negative_price(admin_client, category):
    r = admin_client.post("/api/products", json={"title": "Bad", "price": -1, "categoryId": category.id})
    assert r.status_code == 400


def test_create_product_unknown_category(admin_client):
    r = admin_client.post("/api/products", json={"title": "Lost", "price": 1, "categoryId": "nope"})
    assert r.status_code == 404


def test_delete_product(admin_client, db_session, category):
    p = _product(db_session, category, "mug")
    assert admin_client.delete(f"/api/products/{p.id}").json() == {"success": True}
    assert admin_client.delete(f"/api/products/{p.id}").status_code == 404
