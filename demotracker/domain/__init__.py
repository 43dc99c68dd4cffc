"""Domain entities and pure view helpers (no I/O)."""
