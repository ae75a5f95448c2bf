"""AgentGPS - brokerage commission waterfall engine."""

__version__ = "1.0.0"
