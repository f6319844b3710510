import json
import os
import re
from pathlib import Path
from typing import Any
from uuid import uuid4

from lingochain.config.settings import settings
from lingochain.domain.exceptions import StorageError
from lingochain.domain.storage import KeyValueStore, LoadResult


_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonKeyValueStore(KeyValueStore):
    """每个 key 对应 root 下的一个 JSON 文件，写入采用临时文件 + os.replace。"""

    def __init__(self, root: str | Path | None = None):
        self._root = Path(root or settings.storage_root).resolve()
        self._root.mkdir(parents=True, exist_ok=True)

    def load(self, key: str) -> LoadResult:
        path = self._path(key)
        if not path.exists():
            return LoadResult(status="empty")
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            return LoadResult(status="corrupt", error=str(e))
        if not raw.strip():
            return LoadResult(status="empty")
        try:
            return LoadResult(status="loaded", value=json.loads(raw))
        except json.JSONDecodeError as e:
            return LoadResult(status="corrupt", error=str(e))

    def save(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = self._root / f"{key}.{uuid4().hex}.json.tmp"
        try:
            tmp_path.write_text(json.dumps(value, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(code="STORE_WRITE_ERROR", message=str(e), key=key)

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(code="STORE_DELETE_ERROR", message=str(e), key=key)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(code="STORE_INVALID_KEY", message=key)
        return self._root / f"{key}.json"
