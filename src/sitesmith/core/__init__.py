"""Template resolution engine and build pipeline."""
