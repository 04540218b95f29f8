from fastapi import Request

from catalog_api.core.config import Settings
from catalog_api.repositories import ProductRepository


def get_repository(request: Request) -> ProductRepository:
    # One repository per app, built in create_app around the app's own store.
    return request.app.state.repository


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
