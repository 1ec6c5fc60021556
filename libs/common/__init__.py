"""Common utilities shared across libraries."""
