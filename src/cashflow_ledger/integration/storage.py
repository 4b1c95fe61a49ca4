import json
import os
from datetime import date

from pydantic import ValidationError

from cashflow_ledger.logger import get_logger
from cashflow_ledger.models import LedgerSnapshot

logger = get_logger(__name__)


class JsonLedgerStore:
    """Keeps the ledger snapshot in a single JSON document."""

    def __init__(self, data_path: str = "ledger.json") -> None:
        self.data_path = data_path

    def exists(self) -> bool:
        return os.path.exists(self.data_path)

    def load(self) -> LedgerSnapshot:
        if not self.exists():
            logger.info("[STORE] No ledger at %s, starting empty.", self.data_path)
            return LedgerSnapshot()
        return self._read(self.data_path)

    def save(self, snapshot: LedgerSnapshot) -> None:
        directory = os.path.dirname(self.data_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.data_path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(snapshot.model_dump_json(indent=2))
        os.replace(tmp_path, self.data_path)
        logger.debug("[STORE] Saved ledger to %s", self.data_path)

    def backup(self, snapshot: LedgerSnapshot, directory: str | None = None) -> str:
        target_dir = directory or os.path.dirname(self.data_path) or "."
        os.makedirs(target_dir, exist_ok=True)
        path = os.path.join(target_dir, f"ledger_backup_{date.today().isoformat()}.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write(snapshot.model_dump_json(indent=2))
        logger.info("[STORE] Backup written to %s", path)
        return path

    def _read(self, path: str) -> LedgerSnapshot:
        with open(path, encoding="utf-8") as f:
            raw = f.read()
        try:
            return LedgerSnapshot.model_validate_json(raw)
        except ValidationError as exc:
            logger.error("[STORE] %s is not a valid ledger document: %s", path, exc)
            raise
