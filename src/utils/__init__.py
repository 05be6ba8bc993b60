"""Utilities package for the cake costing application."""
