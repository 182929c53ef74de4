"""Shared quote model, pricing math, configuration and paths."""
