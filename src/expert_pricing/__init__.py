"""
Expert Pricing Package

Quote and commission calculation for the expert network marketplace.
Resolves job pricing using Tier → Urgency → Complexity multipliers, then
splits the quoted price between executor, reviewer and platform.
"""

__version__ = "1.0.0"
