"""Record provider adapters."""

from triage.infrastructure.adapters.provider.json_file_record_provider import (
    JsonFileRecordProvider,
)

__all__ = ["JsonFileRecordProvider"]
