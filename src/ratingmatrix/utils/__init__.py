"""Utility modules for ratingmatrix."""
