from __future__ import annotations

import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class StoredFile:
    path: str
    original_name: str
    size: int


class UploadStore:
    """Writes validated multipart uploads below a base directory."""

    def __init__(self, base_dir: str | Path, *, max_bytes: int):
        self._base_dir = Path(base_dir)
        self._max_bytes = max_bytes

    def save(self, file: FileStorage, *, subdir: str, allowed: Iterable[str]) -> StoredFile:
        original = secure_filename(file.filename or "")
        if not original:
            raise ValidationError("File name is missing")
        ext = os.path.splitext(original)[1].lower()
        allowed = tuple(allowed)
        if ext not in allowed:
            raise ValidationError(f"Invalid file type. Allowed: {', '.join(allowed)}")

        data = file.read()
        if len(data) > self._max_bytes:
            raise ValidationError(f"File too large. Maximum size is {self._max_bytes // (1024 * 1024)}MB")

        target_dir = self._base_dir / subdir
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / f"{uuid.uuid4().hex}{ext}"
        target.write_bytes(data)
        return StoredFile(path=str(target), original_name=original, size=len(data))

    def resolve(self, stored_path: str) -> Path:
        path = Path(stored_path).resolve()
        if self._base_dir.resolve() not in path.parents:
            raise ValidationError("Invalid file path")
        return path

    def discard(self, stored_path: Optional[str]) -> None:
        """Remove a stored file; paths outside the store or already removed are ignored."""
        if not stored_path:
            return
        path = Path(stored_path).resolve()
        if self._base_dir.resolve() in path.parents:
            path.unlink(missing_ok=True)
