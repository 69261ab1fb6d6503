"""Route registration: one portal router per journey, plus its manage router."""

from fastapi import FastAPI

from formflow_journeys.store import JourneyStore

from formflow_server.routes.manage import build_manage_router
from formflow_server.routes.portal import build_portal_router


def register_routes(app: FastAPI, store: JourneyStore) -> None:
    """Mount every loaded journey at its ``route`` and ``manage_route``."""
    for definition in store.list_journeys():
        app.include_router(
            build_portal_router(definition.id, protected=definition.requires_manage_key),
            prefix=definition.route,
        )
        if definition.manage_route:
            app.include_router(build_manage_router(definition.id), prefix=definition.manage_route)
