"""FastAPI application for the image service."""
