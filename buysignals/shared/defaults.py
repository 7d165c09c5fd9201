"""
Centralized default values for indicator and signal parameters.

This is the SINGLE SOURCE OF TRUTH for all parameter defaults.
All modules should import from here to ensure consistency.
"""

# Moving averages shown next to the price chart
SMA_PERIODS = (5, 10, 20, 25, 75)

# RSI (Relative Strength Index) defaults
RSI_PERIOD = 14
RSI_OVERSOLD = 30
RSI_FLAT = 50.0  # Returned when the window has neither gains nor losses

# RCI (Rank Correlation Index) defaults
RCI_PERIODS = (9, 14, 25)  # Short / medium / long lines
RCI_SIGNAL_PERIOD = 9  # Line used by the RCI detectors
RCI_OVERSOLD = -80
RCI_DIVERGENCE_CEILING = -60

# MACD (Moving Average Convergence Divergence) defaults
MACD_FAST = 12
MACD_SLOW = 26
MACD_SIGNAL = 9
MACD_DIVERGENCE_THRESHOLD = 1.0  # macd - signal gap regarded as "wide"

# Stochastic oscillator defaults
STOCH_K_PERIOD = 5
STOCH_D_PERIOD = 3

# MAD rate (moving-average deviation, percent) defaults
MAD_SHORT_PERIOD = 5
MAD_LONG_PERIOD = 25
MAD_OVERSOLD = -3.0

# Bollinger lower band used by the RCI family
BOLLINGER_PERIOD = 10
BOLLINGER_STD_DEV = 2.0

# Open/close family periods
CONSECUTIVE_RISE_PERIOD = 3
CLOSE_MA_PERIOD = 5
RANGE_BREAK_PERIOD = 5

# Weighted RSI aggregation
# Weights sum to 1 across the seven RSI patterns
RSI_PATTERN_WEIGHTS = {
    "oversold_reversal": 0.25,
    "trendline_break": 0.15,
    "bullish_divergence": 0.2,
    "double_bottom": 0.15,
    "support_bounce": 0.1,
    "ma_cross": 0.05,
    "w_bottom": 0.1,
}
RSI_SCORE_THRESHOLD = 0.4  # Total weighted score needed (with enough active patterns)
RSI_MIN_ACTIVE_SIGNALS = 2
RSI_STRONG_SIGNAL = 0.8  # Any single pattern this strong is a buy on its own

# RSI pattern shapes
RSI_MA_SHORT = 5
RSI_MA_LONG = 13
RSI_DOUBLE_BOTTOM_WINDOW = 10
RSI_DOUBLE_BOTTOM_MAX_GAP = 5
RSI_W_BOTTOM_WINDOW = 15
RSI_W_BOTTOM_MAX_GAP = 7
RSI_SUPPORT_MARGIN = 2

# Ranking / display
HIGHLIGHT_MIN_COUNT = 6  # Combined raw count needed to highlight an instrument
DISPLAY_TIMEZONE = "Asia/Tokyo"
