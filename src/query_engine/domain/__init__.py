"""Domain layer: the typed data model, errors and condition evaluation."""
