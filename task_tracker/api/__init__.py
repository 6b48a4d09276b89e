"""HTTP API for Task Tracker (FastAPI)."""
