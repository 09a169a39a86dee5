"""API subpackage - FastAPI app and admin router."""
