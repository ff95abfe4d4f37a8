"""Entity contract and search query models."""
