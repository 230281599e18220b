"""Application services and their FastAPI dependency providers."""
