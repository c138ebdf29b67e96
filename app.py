import asyncio
import os
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()
from datetime import datetime, timezone
from typing import Annotated, Any

from fastapi import Body, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from heartbeat import DEFAULT_INTERVAL, DEFAULT_TIMEOUT, Heartbeat, watch
from storage import DataStore

BASE_DIR           = Path(__file__).parent
DATA_FILE          = Path(os.getenv("HUB_DATA_FILE", BASE_DIR / "data.json"))
FRONTEND_DIR       = Path(os.getenv("HUB_FRONTEND_DIR", BASE_DIR / "frontend"))
HEARTBEAT_TIMEOUT  = float(os.getenv("HEARTBEAT_TIMEOUT", DEFAULT_TIMEOUT))
HEARTBEAT_INTERVAL = float(os.getenv("HEARTBEAT_INTERVAL", DEFAULT_INTERVAL))

NOT_FOUND   = "Não encontrado"
SAVE_FAILED = "Erro ao salvar dados"

_store = DataStore(DATA_FILE)
_heartbeat = Heartbeat(timeout=HEARTBEAT_TIMEOUT)

app = FastAPI(title="Hub Pessoal")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_store() -> DataStore:
    return _store


def get_heartbeat() -> Heartbeat:
    return _heartbeat


def refresh_heartbeat(heartbeat: Annotated[Heartbeat, Depends(get_heartbeat)]) -> None:
    heartbeat.beat()


Store = Annotated[DataStore, Depends(get_store)]
Document = Annotated[Any, Body()]
alive = [Depends(refresh_heartbeat)]


def failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@app.on_event("startup")
async def startup():
    _heartbeat.beat()
    if HEARTBEAT_TIMEOUT > 0:
        app.state.heartbeat_task = asyncio.create_task(watch(_heartbeat, HEARTBEAT_INTERVAL))


@app.get("/api/heartbeat", dependencies=alive)
def heartbeat_endpoint():
    return {"ok": True}


@app.get("/", dependencies=alive)
def root():
    return FileResponse(FRONTEND_DIR / "index.html")


@app.get("/api/data", dependencies=alive)
def get_data(store: Store):
    return JSONResponse(content=store.read_data())


@app.post("/api/data", dependencies=alive)
def post_data(document: Document, store: Store):
    if not store.save_data(document):
        return failure(500, SAVE_FAILED)
    return {"success": True, "message": "Dados salvos com sucesso!"}


def add_collection(segment: str, field: str, key: str = "id", update: bool = True) -> None:
    """
    Register the list/append/delete (and optionally update) routes for one
    collection of the document under /api/<segment>.

    Records are matched by comparing record[key] with the path segment as a
    string. Update touches the first match only; delete drops every match and
    succeeds even when nothing matched.
    """
    path = f"/api/{segment}"

    @app.get(path, name=f"list_{segment}")
    def list_items(store: Store):
        return store.read_data().get(field) or []

    @app.post(path, name=f"add_{segment}")
    def add_item(item: Document, store: Store):
        with store.lock:
            data = store.read_data()
            data[field].append(item)
            if not store.save_data(data):
                return failure(500, SAVE_FAILED)
        return {"success": True, "data": item}

    if update:
        @app.put(path + "/{item_id}", name=f"update_{segment}")
        def update_item(item_id: str, patch: dict, store: Store):
            with store.lock:
                data = store.read_data()
                items = data[field]
                for index, item in enumerate(items):
                    if isinstance(item, dict) and item.get(key) == item_id:
                        items[index] = {**item, **patch}
                        break
                else:
                    return failure(404, NOT_FOUND)
                if not store.save_data(data):
                    return failure(500, SAVE_FAILED)
            return {"success": True, "data": items[index]}

    @app.delete(path + "/{item_id}", name=f"delete_{segment}")
    def delete_item(item_id: str, store: Store):
        with store.lock:
            data = store.read_data()
            data[field] = [
                item for item in data[field]
                if not (isinstance(item, dict) and item.get(key) == item_id)
            ]
            if not store.save_data(data):
                return failure(500, SAVE_FAILED)
        return {"success": True}


add_collection("afazeres", "afazeres")
add_collection("checklist", "checklist")
add_collection("checkstatus", "checkStatus", key="key", update=False)
add_collection("metas", "metas")
add_collection("financeiro", "financeiro", update=False)


@app.get("/api/backup")
def backup(store: Store):
    today = datetime.now(timezone.utc).date().isoformat()
    return JSONResponse(
        content=store.read_data(),
        headers={"Content-Disposition": f"attachment; filename=hub-backup-{today}.json"},
    )


@app.post("/api/restore")
def restore(document: Document, store: Store):
    if not store.save_data(document):
        return failure(500, "Erro ao restaurar backup")
    return {"success": True, "message": "Backup restaurado com sucesso!"}


# Mounted last so the API routes above take precedence.
app.mount("/", StaticFiles(directory=FRONTEND_DIR, html=True), name="frontend")
