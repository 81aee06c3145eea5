"""Performance tests for template parsing and rendering."""
