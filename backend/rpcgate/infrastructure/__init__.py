"""Infrastructure — database pool and logging setup."""
