"""Simulated insulin pump with CGM readings, bolus safety checks, history and a console interface."""

__version__ = "0.1.0"