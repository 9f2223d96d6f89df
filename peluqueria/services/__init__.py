"""Integrations with the auth provider and the REST API."""
