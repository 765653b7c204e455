"""
slacalc - business-hours SLA calculator for support tickets.
"""

__version__ = "0.1.0"
