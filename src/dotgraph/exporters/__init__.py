"""Structural exports of graph trees."""
