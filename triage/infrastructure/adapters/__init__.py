"""Infrastructure adapters for the triage system.

Concrete implementations of the application ports:
- persistence: SqlCursorStore (CursorStoreProtocol)
- provider: JsonFileRecordProvider (RecordProviderProtocol)
"""
