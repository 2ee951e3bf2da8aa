"""HTTP API for the triage review queue (FastAPI)."""
