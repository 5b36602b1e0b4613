"""Services: imperative shell around core/ (DB queries, external calls)."""
