"""Drivers and renderers built on the timing core."""
