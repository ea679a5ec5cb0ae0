"""Analytics overview updater: Google Analytics summaries into a relational store"""

__version__ = "1.0.0"
