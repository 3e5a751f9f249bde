"""Starter HTTP API for customers, events and user profiles, with message models and helpers."""

__version__ = "1.0.0"