"""Operational scripts; the roster diff tool lives in scripts.repartee."""
