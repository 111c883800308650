"""Response models for the web API."""
