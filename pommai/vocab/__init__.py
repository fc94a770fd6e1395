"""Vocabulary tables: built-in Tamil defaults and the JSON loader."""
