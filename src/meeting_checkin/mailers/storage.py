from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..core.exceptions import NotFoundError, ValidationError

_FILE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*\.pdf$")


class MailerStorage:
    """Generated PDFs live under ``<base_dir>/<meeting id>/``."""

    def __init__(self, base_dir: str | Path):
        self._base = Path(base_dir)

    @staticmethod
    def _meeting_key(meeting_id) -> str:
        key = str(meeting_id).strip()
        if not key.isdigit():
            raise ValidationError("meetingId must be a whole number")
        return key

    def meeting_dir(self, meeting_id) -> Path:
        return self._base / self._meeting_key(meeting_id)

    def path_for(self, meeting_id, file_name: str) -> Path:
        if not _FILE_NAME.match(file_name or ""):
            raise ValidationError("Invalid file name")
        return self.meeting_dir(meeting_id) / file_name

    def existing(self, meeting_id, file_name: str) -> Path:
        path = self.path_for(meeting_id, file_name)
        if not path.is_file():
            raise NotFoundError("File not found")
        return path

    def list_files(self, meeting_id) -> list[dict]:
        folder = self.meeting_dir(meeting_id)
        if not folder.is_dir():
            return []
        out = []
        for path in sorted(folder.glob("*.pdf")):
            stat = path.stat()
            out.append(
                {
                    "name": path.name,
                    "size": stat.st_size,
                    "created": datetime.fromtimestamp(stat.st_mtime).isoformat(),
                }
            )
        return out

    def delete(self, meeting_id, file_name: Optional[str] = None) -> int:
        if file_name:
            self.existing(meeting_id, file_name).unlink()
            return 1

        removed = 0
        for path in self.meeting_dir(meeting_id).glob("*.pdf"):
            path.unlink()
            removed += 1
        return removed
