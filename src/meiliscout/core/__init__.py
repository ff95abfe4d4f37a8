"""Driver core — translation, synchronization, query execution and result mapping."""
