"""Read-only query selectors over project records."""
