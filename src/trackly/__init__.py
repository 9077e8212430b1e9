"""Trackly bus schedule matching service."""
