"""
JSON File Storage

The whole loan collection lives in one JSON document:

    {"version": 1, "loans": [ {...}, {...} ]}

Saves are all-or-nothing: the document is written to a temporary file in
the same directory and then moved over the previous one.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Sequence, Union

from pydantic import ValidationError

from loan_tracker.models.loan import Loan
from loan_tracker.services.storage.interface import (
    LoanStorageInterface,
    StorageError,
)


FORMAT_VERSION = 1


class JsonFileLoanStorage(LoanStorageInterface):
    """Stores loans in a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Loan]:
        """Read the file; a missing file means no loans yet."""
        if not self._path.exists():
            return []

        try:
            with self._path.open("r", encoding="utf-8") as fh:
                document = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {self._path}: {e}") from e

        if isinstance(document, list):
            # Bare array written by older versions
            records = document
        elif isinstance(document, dict):
            records = document.get("loans", [])
        else:
            raise StorageError(f"Unexpected document in {self._path}")

        try:
            return [Loan.model_validate(record) for record in records]
        except ValidationError as e:
            raise StorageError(f"Malformed loan record in {self._path}: {e}") from e

    def save(self, loans: Sequence[Loan]) -> bool:
        """Write the full collection atomically."""
        document = {
            "version": FORMAT_VERSION,
            "loans": [loan.model_dump(mode="json") for loan in loans],
        }

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=self._path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(document, fh, indent=2)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}") from e

        return True
