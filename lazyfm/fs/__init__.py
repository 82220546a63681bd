"""Filesystem listing, mutations and preview loading."""
