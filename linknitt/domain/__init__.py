"""Domain operations, errors and demo data."""
