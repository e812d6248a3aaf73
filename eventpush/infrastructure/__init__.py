"""Adapters for the document store, the database and Firebase."""
