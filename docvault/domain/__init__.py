"""Domain layer: access lattice, revision diffing, enums and exceptions (no I/O)."""
