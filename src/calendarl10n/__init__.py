"""Localization catalogues for the calendar user interface."""
