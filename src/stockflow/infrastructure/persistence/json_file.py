"""A JSON file holding a list of objects, shared by the file-backed adapters."""

from __future__ import annotations

import json
import os
from pathlib import Path


class JsonListFile:

    def __init__(self, path: Path, create: bool = True) -> None:
        self.path = path
        if create and not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            self.write([])

    def read(self) -> list[dict]:
        """Return the stored rows; a missing file reads as empty."""
        if not self.path.exists():
            return []
        return json.loads(self.path.read_text(encoding="utf-8"))

    def write(self, rows: list[dict]) -> None:
        # Write beside the target and swap it in so readers never see half a file.
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(rows, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp, self.path)
