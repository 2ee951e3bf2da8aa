"""
Infrastructure layer - External adapters for the triage system.

This layer contains:
- SQL cursor store (SQLAlchemy)
- JSON file record provider
- In-memory stubs for tests and development
- Observability (structlog configuration, correlation IDs)

IMPORT RULES:
- CAN import from: domain, application
- Implements ports defined in application layer
"""
