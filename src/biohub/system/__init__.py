"""Process-level concerns: filesystem paths and logging setup."""
