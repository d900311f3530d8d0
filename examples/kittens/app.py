"""Kittens: a small JSON API built on waypoint.

``POST /kittens`` creates a kitten (201 by default, as for every POST
route) and ``GET /kittens/{id}`` fetches one through a sub-router with
the ``/kittens`` prefix. Request bodies follow the JSON:API shape::

    {"data": {"attributes": {"name": "Tom", "color": "grey"}}}

The controller holds its store explicitly; there is no module-level
state, so every ``create_router()`` call starts empty.

Run:
    WAYPOINT_PORT=31337 python examples/kittens/app.py
    # or: waypoint run app:create_router  (from examples/kittens)
"""

import json
import threading
import uuid
from dataclasses import dataclass

from waypoint import AppConfig, HTTPError, NotFound, RequestContext, Router

# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Kitten:
    id: str
    name: str
    color: str = ""


class KittenStore:
    """In-memory kitten storage, safe for concurrent requests."""

    def __init__(self) -> None:
        self._kittens: dict[str, Kitten] = {}
        self._lock = threading.Lock()

    def add(self, name: str, color: str = "") -> Kitten:
        kitten = Kitten(id=str(uuid.uuid4()), name=name, color=color)
        with self._lock:
            self._kittens[kitten.id] = kitten
        return kitten

    def get(self, kitten_id: str) -> Kitten | None:
        with self._lock:
            return self._kittens.get(kitten_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._kittens)


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


def _document(kitten: Kitten) -> dict:
    attributes = {"name": kitten.name}
    if kitten.color:
        attributes["color"] = kitten.color
    return {"data": {"id": kitten.id, "attributes": attributes}}


class KittensController:
    def __init__(self, store: KittenStore) -> None:
        self.store = store

    async def add_kitten(self, ctx: RequestContext) -> None:
        try:
            body = await ctx.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise HTTPError(400, "request body must be JSON") from None

        data = body.get("data", {}) if isinstance(body, dict) else None
        attributes = data.get("attributes", {}) if isinstance(data, dict) else None
        if not isinstance(attributes, dict):
            raise HTTPError(400, "data.attributes must be an object")

        name = str(attributes.get("name", "")).strip()
        if not name:
            raise HTTPError(400, "data.attributes.name is required")

        kitten = self.store.add(name, str(attributes.get("color", "")))
        ctx.logger.info("Created kitten with ID %s", kitten.id)
        ctx.write_response(_document(kitten))

    def get_kitten(self, ctx: RequestContext) -> dict:
        raw_id = ctx.route_var("id", "")
        try:
            kitten_id = str(uuid.UUID(raw_id, version=4))
        except ValueError:
            raise HTTPError(400, "kitten id should be a uuid4 string") from None

        kitten = self.store.get(kitten_id)
        if kitten is None:
            raise NotFound(f"kitten id '{kitten_id}' does not exist")
        return _document(kitten)


def register_kittens(router: Router, controller: KittensController) -> None:
    router.post("/kittens", controller.add_kitten)
    # Routes on the sub-router live under /kittens
    kittens = router.sub_router_for_path("/kittens")
    kittens.get("/{id}", controller.get_kitten)


def create_router(config: AppConfig | None = None, store: KittenStore | None = None) -> Router:
    router = Router(config=config)
    register_kittens(router, KittensController(store or KittenStore()))
    return router


if __name__ == "__main__":
    from waypoint.server.run import run_server

    run_server(create_router(AppConfig.from_env()))
