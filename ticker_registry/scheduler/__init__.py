"""Recurring registry maintenance jobs."""
