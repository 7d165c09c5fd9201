"""
Command-line entry points for the buy-signal engine.

Provides command-line interfaces for:
- Scanning instruments and ranking them by buy-signal count
"""
