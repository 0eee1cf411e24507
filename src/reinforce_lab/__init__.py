"""Reinforce Lab: a deterministic craft-forge-explore idle game engine."""

__version__ = "0.1.0"
