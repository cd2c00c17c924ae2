"""Infrastructure layer: relational store, cache client and logging."""
