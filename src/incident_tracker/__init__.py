"""Incident Tracker - incident CRUD API and terminal front end."""

__version__ = "0.1.0"
