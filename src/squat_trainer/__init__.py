"""Paced slow-squat timer with terminal and browser views."""

__version__ = "0.1.0"
