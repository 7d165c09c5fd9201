"""
Buy-signal engine for ordered price bars.

Provides unified interfaces for:
- Rolling-window arithmetic and streaming indicators (SMA, EMA, RSI, RCI, MACD, Stochastic, MAD rate)
- Per-family buy-signal detectors (RSI, MACD, MAD rate, RCI, open/close)
- Signal aggregation (weighted RSI score and raw count ranking)
- Bar validation and the series adapter that feeds everything in one pass
"""
