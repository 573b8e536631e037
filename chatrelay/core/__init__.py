"""Core building blocks: errors, credentials, profiles, limits and logging."""
