"""Models and helpers for a home automation control panel.

It covers rooms, IOs, lights, favourites, the event log, weather, the local
configuration and the desktop panel.
"""

__version__ = "0.1.0"