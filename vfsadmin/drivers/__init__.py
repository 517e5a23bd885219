"""Drivers implementing kernel ports."""
