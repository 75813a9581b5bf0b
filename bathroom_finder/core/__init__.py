"""Core functionality: hashing, validation, errors and logging."""
