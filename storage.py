import json
import logging
import threading
from pathlib import Path

logger = logging.getLogger("hub.storage")

COLLECTIONS = (
    "afazeres",
    "checklist",
    "checkStatus",
    "metas",
    "financeiro",
    "notas",
    "gastosFixos",
    "investimentos",
)


def empty_document() -> dict:
    return {name: [] for name in COLLECTIONS}


class DataStore:
    """
    The whole hub state lives in one JSON file.

    Callers always read the full document, mutate it in memory and hand the
    full document back to save_data. There is no partial write. Handlers hold
    `lock` across the whole read-modify-write; it is reentrant, so read_data
    and save_data take it too.
    """

    def __init__(self, path):
        self.path = Path(path)
        self.lock = threading.RLock()

    def read_data(self) -> dict:
        with self.lock:
            try:
                if not self.path.exists():
                    data = empty_document()
                    self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
                    return data
                data = json.loads(self.path.read_text(encoding="utf-8"))
                if not isinstance(data, dict):
                    raise ValueError(f"expected a JSON object, got {type(data).__name__}")
                # Files saved by older versions lack the newer collections.
                # Any falsy value ("", 0, false, null) is reset to an empty list.
                for name in COLLECTIONS:
                    if not data.get(name):
                        data[name] = []
                return data
            except (OSError, ValueError):
                logger.exception("Erro ao ler dados de %s", self.path)
                return empty_document()

    def save_data(self, data) -> bool:
        with self.lock:
            try:
                text = json.dumps(data, indent=2, ensure_ascii=False)
                self.path.write_text(text, encoding="utf-8")
                return True
            except (OSError, TypeError, ValueError):
                logger.exception("Erro ao salvar dados em %s", self.path)
                return False
