"""Parsers for fiscal XML documents and bank statements."""
