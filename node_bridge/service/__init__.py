"""Companion HTTP service receiving WordPress events and serving stub endpoints."""
