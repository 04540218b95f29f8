from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from catalog_api.core.config import get_settings
from catalog_api.core.logging import get_logger

logger = get_logger(__name__)


class ProductServiceError(Exception):
    """
    A products API call failed.

    ``str(err)`` is ``"<operation>: <message>"``. ``status_code`` is None when
    the request never got an HTTP response (connection refused, timeout).
    """

    def __init__(self, operation: str, message: str, status_code: Optional[int] = None) -> None:
        self.operation = operation
        self.message = message
        self.status_code = status_code
        super().__init__(f"{operation}: {message}")


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if message:
            return str(message)
    return response.text or response.reason_phrase or f"HTTP {response.status_code}"


class ProductsClient:
    """
    Thin client for the products API: one method per endpoint, one round trip per call.

    No retries and no caching; failures surface as ProductServiceError and
    retry policy is left to the caller. Pass ``client`` to reuse an existing
    httpx.Client (FastAPI's TestClient works too).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if client is None:
            settings = get_settings()
            client = httpx.Client(
                base_url=(base_url or settings.catalog_base_url).rstrip("/"),
                timeout=timeout if timeout is not None else settings.client_timeout_seconds,
            )
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = client

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ProductsClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.info("%s failed: %s", operation, e)
            raise ProductServiceError(operation, str(e) or e.__class__.__name__) from e

        if response.is_error:
            raise ProductServiceError(operation, _error_message(response), status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ProductServiceError(operation, "Invalid JSON in response", status_code=response.status_code) from e

    def list_products(self) -> List[Dict[str, Any]]:
        return self._request("list_products", "GET", "/products")

    def list_categories(self) -> List[str]:
        return self._request("list_categories", "GET", "/products/categories")

    def list_products_by_category(self, category: str) -> List[Dict[str, Any]]:
        return self._request("list_products_by_category", "GET", f"/products/category/{_segment(category)}")

    def get_product(self, product_id: str) -> Dict[str, Any]:
        return self._request("get_product", "GET", f"/products/{_segment(product_id)}")

    def create_product(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("create_product", "POST", "/products", json=data)

    def update_product(self, product_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("update_product", "PUT", f"/products/{_segment(product_id)}", json=data)

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        return self._request("delete_product", "DELETE", f"/products/{_segment(product_id)}")
