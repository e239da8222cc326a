"""Ministering Companion API."""
