"""docvault: multi-user document store with graded sharing and cascaded search."""
