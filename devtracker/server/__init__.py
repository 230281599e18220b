"""FastAPI server for DevTracker."""
