from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status

from catalog_api.core.config import Settings
from catalog_api.core.deps import get_app_settings, get_repository
from catalog_api.repositories import ProductRepository
from catalog_api.schemas import DeleteResult, ProductRead

health_router = APIRouter()


@health_router.get("/health")
def health(settings: Settings = Depends(get_app_settings)):
    return {
        "status": "ok",
        "service": settings.app_name,
        "env": settings.environment,
        "version": settings.app_version,
    }


router = APIRouter(prefix="/products", tags=["products"])

# Literal paths first: /products/{product_id} would otherwise capture "categories".
# Categories may contain "/", so that route takes the rest of the path; ids cannot.


@router.get("", response_model=List[ProductRead])
def http_list_products(repo: ProductRepository = Depends(get_repository)):
    return repo.list()


@router.get("/categories", response_model=List[str])
def http_list_categories(repo: ProductRepository = Depends(get_repository)):
    return repo.list_categories()


@router.get("/category/{category:path}", response_model=List[ProductRead])
def http_list_products_by_category(category: str, repo: ProductRepository = Depends(get_repository)):
    return repo.list_by_category(category)


@router.get("/{product_id}", response_model=ProductRead)
def http_get_product(product_id: str, repo: ProductRepository = Depends(get_repository)):
    return repo.get_by_id(product_id)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def http_create_product(
    payload: Dict[str, Any] = Body(...),
    repo: ProductRepository = Depends(get_repository),
):
    return repo.create(payload)


@router.put("/{product_id}", response_model=ProductRead)
def http_update_product(
    product_id: str,
    payload: Dict[str, Any] = Body(...),
    repo: ProductRepository = Depends(get_repository),
):
    return repo.update(product_id, payload)


@router.delete("/{product_id}", response_model=DeleteResult)
def http_delete_product(product_id: str, repo: ProductRepository = Depends(get_repository)):
    repo.delete(product_id)
    return DeleteResult(message="Product deleted", id=product_id)
