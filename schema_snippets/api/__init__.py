"""HTTP surface of the schema snippets service."""
