"""Plugin record catalog: typed records, YAML store, reconciliation and index."""
