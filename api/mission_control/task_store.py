"""Read-only access to the static task file."""

import asyncio
import json
from pathlib import Path
from typing import Any

from .models import TaskStoreError


class TaskStore:
    """Reads task records from a JSON file on every call.

    The file holds either a JSON array of tasks or an object with a
    "tasks" array. Task records are returned unmodified.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def list_tasks(self) -> list[Any]:
        """Return all task records.

        Raises:
            TaskStoreError: If the file is missing, invalid, or holds no task list
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read_tasks)

    def _read_tasks(self) -> list[Any]:
        try:
            content = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TaskStoreError(f"cannot read task file {self._path}: {e}") from e

        try:
            data = json.loads(content)
        except ValueError as e:
            raise TaskStoreError(f"invalid JSON in task file {self._path}: {e}") from e

        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            tasks = data.get("tasks") or []
            if isinstance(tasks, list):
                return tasks
            raise TaskStoreError(f'"tasks" in {self._path} is not a list')
        raise TaskStoreError(f"task file {self._path} holds neither a list nor an object")
