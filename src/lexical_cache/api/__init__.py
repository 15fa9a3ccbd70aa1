"""HTTP API for the lexical cache."""
