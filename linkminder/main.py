import json
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, load_settings
from .errors import InvalidLinkError, InvalidReminderError, LinkNotFoundError, UnknownSortCriterionError
from .manager import LinkManager
from .models import AddLinkRequest, RemoveLinkRequest, SetReminderRequest, SortIn
from .storage import JsonFileKeyValueStore, PersistenceStore


def build_manager(settings: Settings) -> LinkManager:
    store = PersistenceStore(
        JsonFileKeyValueStore(settings.state_file),
        links_key=settings.links_key,
        sort_key=settings.sort_key,
        default_sort=settings.default_sort,
    )
    return LinkManager.open(store, assume_https=settings.assume_https)


def get_manager(request: Request) -> LinkManager:
    return request.app.state.manager


def create_app(
    settings: Optional[Settings] = None,
    manager: Optional[LinkManager] = None,
) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="LinkMinder")
    app.state.settings = settings
    app.state.manager = manager or build_manager(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/links")
    def list_links(sort: Optional[str] = None, mgr: LinkManager = Depends(get_manager)):
        return [link.to_record() for link in mgr.sorted_links(sort)]

    @app.post("/api/links", status_code=201)
    def add_link(body: AddLinkRequest, mgr: LinkManager = Depends(get_manager)):
        try:
            link = mgr.add_link(body)
        except InvalidLinkError as e:
            raise HTTPException(400, str(e))
        return link.to_record()

    @app.post("/api/links/reminder")
    def set_reminder(body: SetReminderRequest, mgr: LinkManager = Depends(get_manager)):
        try:
            link = mgr.set_reminder(body)
        except LinkNotFoundError as e:
            raise HTTPException(404, str(e))
        except InvalidReminderError as e:
            raise HTTPException(400, str(e))
        return link.to_record()

    @app.post("/api/links/remove")
    def remove_link(body: RemoveLinkRequest, mgr: LinkManager = Depends(get_manager)):
        try:
            mgr.remove_link(body)
        except LinkNotFoundError as e:
            raise HTTPException(404, str(e))
        return {"ok": True}

    @app.get("/api/sort")
    def get_sort(mgr: LinkManager = Depends(get_manager)):
        return {"criterion": mgr.criterion.value}

    @app.post("/api/sort")
    def set_sort(body: SortIn, mgr: LinkManager = Depends(get_manager)):
        try:
            criterion = mgr.set_sort_criterion(body.criterion)
        except UnknownSortCriterionError as e:
            raise HTTPException(400, str(e))
        return {"criterion": criterion.value}

    @app.get("/api/export/json")
    def export_json(mgr: LinkManager = Depends(get_manager)):
        raw = mgr.store.export_raw()
        if raw is None:
            return []
        try:
            return json.loads(raw)
        except (ValueError, RecursionError):
            raise HTTPException(500, "Stored links are not valid JSON")

    return app
