"""Sealbid command line interface."""
