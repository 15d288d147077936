# nametag/dependencies.py
"""
Dependency injection for the nametag API.

The service is built once in the application lifespan and held on
``app.state``; this getter hands it to endpoints. Tests replace it with
``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request

from .services.nametag_service import NametagService


def get_nametag_service(request: Request) -> NametagService:
    return request.app.state.nametag_service


NametagServiceDep = Annotated[NametagService, Depends(get_nametag_service)]
