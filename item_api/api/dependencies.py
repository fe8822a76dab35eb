from fastapi import Request

from ..config import ItemApiConfig
from ..handlers import ItemsReadApi


def get_config(request: Request) -> ItemApiConfig:
    return request.app.state.config


def get_read_api(request: Request) -> ItemsReadApi:
    return request.app.state.read_api
