"""FastAPI application for the parcelmap backend."""
