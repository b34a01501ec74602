from fastapi import Request

from core.session import RecipeSession
from services.ai_gateway import ChefGateway
from storage.local_storage import LocalStorage


def get_storage(request: Request) -> LocalStorage:
    """Storage shared by all requests of the app"""
    return request.app.state.storage


def get_gateway(request: Request) -> ChefGateway:
    return request.app.state.gateway


def get_session(request: Request):
    """A fresh session per request, detached from storage afterwards"""
    session = RecipeSession(get_storage(request), get_gateway(request))
    try:
        yield session
    finally:
        session.close()
