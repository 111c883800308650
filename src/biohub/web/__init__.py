"""FastAPI host for the species-speed charts."""
