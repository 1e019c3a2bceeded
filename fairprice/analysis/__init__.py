"""Batch tools built on the fair price engine."""
