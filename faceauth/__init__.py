"""Face descriptor similarity, authentication and matching service."""
