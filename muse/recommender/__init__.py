"""Single-movie recommendation and candidate browsing."""
