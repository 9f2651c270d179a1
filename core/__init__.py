"""Core domain modules.

This package contains the building blocks of the adaptive scanner:

- indicators: EMA, MACD, OBV, stochastic, ATR, volume pressure, order-book imbalance
- signals: weight vector, indicator readings and directional scoring
- learning: walk-forward weight learner and cross-instrument aggregation
- scanner: scan cycle, bounded sweep, report and background runner
- market_data: Binance candles, order books and symbol universe
- notifications: Telegram delivery of scan reports
- persistence: persistence and notification boundaries (interfaces)
- storage: SQLAlchemy weight store
"""
