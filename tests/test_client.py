import httpx
import pytest

from catalog_api.client import ProductsClient, ProductServiceError


@pytest.fixture
def products(memory_client) -> ProductsClient:
    # TestClient is an httpx.Client, so the service layer talks to the app in-process.
    return ProductsClient(client=memory_client)


def test_crud_round_trip(products, product_data):
    created = products.create_product(product_data(id="m1"))
    assert created["id"] == "m1"

    assert products.get_product("m1") == created
    assert [p["id"] for p in products.list_products()] == ["m1"]
    assert products.list_categories() == ["Electronics"]
    assert [p["id"] for p in products.list_products_by_category("Electronics")] == ["m1"]

    updated = products.update_product("m1", {"inStock": False})
    assert updated["inStock"] is False

    assert products.delete_product("m1") == {"message": "Product deleted", "id": "m1"}
    assert products.list_products() == []


def test_category_with_special_characters(products, product_data):
    products.create_product(product_data(id="k1", category="Home & Kitchen"))
    assert [p["id"] for p in products.list_products_by_category("Home & Kitchen")] == ["k1"]


def test_not_found_is_prefixed_with_operation(products):
    with pytest.raises(ProductServiceError) as exc_info:
        products.get_product("missing")

    err = exc_info.value
    assert err.operation == "get_product"
    assert err.status_code == 404
    assert str(err).startswith("get_product: ")
    assert "missing" in err.message


def test_validation_failure_is_normalized(products, product_data):
    with pytest.raises(ProductServiceError) as exc_info:
        products.create_product(product_data(price=-2))

    assert exc_info.value.operation == "create_product"
    assert exc_info.value.status_code == 400
    assert "price" in exc_info.value.message


def test_delete_unknown_is_normalized(products):
    with pytest.raises(ProductServiceError) as exc_info:
        products.delete_product("missing")
    assert exc_info.value.operation == "delete_product"
    assert exc_info.value.status_code == 404


def test_transport_error_is_normalized_without_retry():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.Client(base_url="http://catalog.invalid", transport=httpx.MockTransport(handler))
    with ProductsClient(client=http) as products:
        with pytest.raises(ProductServiceError) as exc_info:
            products.list_products()

    assert exc_info.value.operation == "list_products"
    assert exc_info.value.status_code is None
    assert "connection refused" in str(exc_info.value)
    assert calls == ["/products"]


def test_non_json_error_body_uses_text():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad gateway from proxy")

    http = httpx.Client(base_url="http://catalog.invalid", transport=httpx.MockTransport(handler))
    products = ProductsClient(client=http)

    with pytest.raises(ProductServiceError) as exc_info:
        products.list_categories()
    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Bad gateway from proxy"


def test_owned_client_uses_base_url_and_timeout():
    products = ProductsClient("http://catalog.example:8000/", timeout=2.5)
    try:
        assert products._client.base_url.host == "catalog.example"
        assert products._client.base_url.port == 8000
        assert products._client.timeout.connect == 2.5
    finally:
        products.close()


def test_category_with_slash(products, product_data):
    products.create_product(product_data(id="g1", category="Home/Garden"))
    assert [p["id"] for p in products.list_products_by_category("Home/Garden")] == ["g1"]
    assert products.get_product("g1")["category"] == "Home/Garden"


def test_id_with_slash_is_rejected(products, product_data):
    with pytest.raises(ProductServiceError) as exc_info:
        products.create_product(product_data(id="a/b"))
    assert exc_info.value.status_code == 400
    assert "id" in exc_info.value.message
