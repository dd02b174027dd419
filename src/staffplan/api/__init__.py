"""staffplan HTTP surface - thin FastAPI handlers over the engine."""
