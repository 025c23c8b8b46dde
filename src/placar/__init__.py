"""Placar: championship management with standings and round-robin fixtures."""
