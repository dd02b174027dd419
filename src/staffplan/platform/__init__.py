"""Cross-cutting platform concerns: configuration and logging."""
