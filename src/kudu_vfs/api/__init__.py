"""Kudu REST API dispatch and operation wrappers."""
