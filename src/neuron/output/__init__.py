"""Output layer — result formatting and terminal rendering."""
