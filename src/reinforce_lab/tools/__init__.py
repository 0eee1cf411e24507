"""Offline balancing tools."""
