"""dcrwebapi HTTP query surface (FastAPI)."""
