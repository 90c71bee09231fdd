"""Descriptor comparison, authentication and matching services."""
