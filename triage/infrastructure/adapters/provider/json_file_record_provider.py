"""JSON file record provider adapter.

Serves contacts from a JSON file holding an array of record objects:

    [
        {"identifier": "A1", "given_name": "Ada", "family_name": "Lovelace",
         "phone_numbers": ["+44 20 0000"], "email_addresses": []},
        ...
    ]

Permission is granted when the file exists and is readable. Deletes and
updates rewrite the whole file atomically (temp file + replace), so a
crash never leaves a half-written contact list behind. Blocking file I/O
runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

from triage.application.ports.record_provider import RecordProviderProtocol
from triage.domain.errors.provider import (
    DeleteFailedError,
    FetchFailedError,
    UpdateFailedError,
)
from triage.domain.errors.record import RecordNotFoundError
from triage.domain.models.record import Record, RecordUpdate
from triage.infrastructure.observability.logging import get_logger_for_service

DEFAULT_BATCH_SIZE = 50


class JsonFileRecordProvider(RecordProviderProtocol):
    """Record provider reading and rewriting a JSON contacts file.

    Attributes:
        _path: Location of the contacts file.
        _batch_size: Records per streamed batch.
        _write_lock: Serializes rewrites of the file.
    """

    def __init__(self, path: Path | str, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        """Initialize the provider.

        Args:
            path: JSON contacts file.
            batch_size: Records per streamed batch (minimum 1).
        """
        self._path = Path(path)
        self._batch_size = max(1, batch_size)
        self._write_lock = asyncio.Lock()
        self._log = get_logger_for_service(
            "JsonFileRecordProvider", component="record_provider"
        ).bind(path=str(self._path))

    @property
    def path(self) -> Path:
        """Location of the contacts file."""
        return self._path

    async def request_permission(self) -> bool:
        """Grant access when the contacts file can be read."""
        granted = await asyncio.to_thread(self._is_readable)
        if not granted:
            self._log.warning("contacts_file_unreadable")
        return granted

    def _is_readable(self) -> bool:
        return self._path.is_file() and os.access(self._path, os.R_OK)

    async def stream_records(self) -> AsyncIterator[list[Record]]:
        """Read the file and stream its records in batches.

        Raises:
            FetchFailedError: If the file cannot be read or parsed, or an
                entry is not a valid record.
        """
        try:
            entries = await asyncio.to_thread(self._read_entries)
        except (OSError, ValueError) as exc:
            self._log.warning("contacts_file_read_failed", error=str(exc))
            raise FetchFailedError(f"Cannot read {self._path}: {exc}") from exc

        batch: list[Record] = []
        for position, entry in enumerate(entries):
            try:
                batch.append(Record.from_dict(entry))
            except (TypeError, ValueError) as exc:
                raise FetchFailedError(f"Invalid record at position {position}: {exc}") from exc
            if len(batch) >= self._batch_size:
                yield batch
                batch = []
        if batch:
            yield batch

    async def delete(self, record: Record) -> None:
        """Remove the record from the file.

        Raises:
            DeleteFailedError: If the record is not in the file or the file
                cannot be rewritten.
        """
        async with self._write_lock:
            try:
                await asyncio.to_thread(self._delete_sync, record.identifier)
            except (OSError, ValueError, RecordNotFoundError) as exc:
                raise DeleteFailedError(record.identifier, str(exc)) from exc
        self._log.info("record_deleted", identifier=record.identifier)

    def _delete_sync(self, identifier: str) -> None:
        entries = self._read_entries()
        remaining = [e for e in entries if e.get("identifier") != identifier]
        if len(remaining) == len(entries):
            raise RecordNotFoundError(identifier)
        self._write_entries(remaining)

    async def update(self, record: Record, update: RecordUpdate) -> Record:
        """Merge the update into the stored record and rewrite the file.

        Raises:
            UpdateFailedError: If the record is not in the file or the file
                cannot be rewritten.
        """
        async with self._write_lock:
            try:
                updated = await asyncio.to_thread(self._update_sync, record.identifier, update)
            except (OSError, ValueError, RecordNotFoundError) as exc:
                raise UpdateFailedError(record.identifier, str(exc)) from exc
        self._log.info(
            "record_updated",
            identifier=record.identifier,
            fields=sorted(update.changed_fields()),
        )
        return updated

    def _update_sync(self, identifier: str, update: RecordUpdate) -> Record:
        entries = self._read_entries()
        for index, entry in enumerate(entries):
            if entry.get("identifier") == identifier:
                updated = Record.from_dict(entry).with_update(update)
                # Unknown keys in the file entry are preserved
                entries[index] = {**entry, **updated.to_dict()}
                self._write_entries(entries)
                return updated
        raise RecordNotFoundError(identifier)

    def _read_entries(self) -> list[dict[str, Any]]:
        with self._path.open(encoding="utf-8") as handle:
            data = json.load(handle)
        if not isinstance(data, list):
            raise ValueError("contacts file must hold a JSON array")
        for entry in data:
            if not isinstance(entry, dict):
                raise ValueError("contacts file entries must be JSON objects")
        return data

    def _write_entries(self, entries: list[dict[str, Any]]) -> None:
        tmp_path = self._path.with_name(f".{self._path.name}.tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(entries, handle, indent=2, ensure_ascii=False)
            handle.write("\n")
        os.replace(tmp_path, self._path)
