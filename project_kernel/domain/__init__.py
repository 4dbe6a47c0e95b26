"""Pure domain types for the project health engine. Zero I/O."""
