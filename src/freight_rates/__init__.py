"""
Freight Rates Package

Resolves contractual payouts for CDD delivery runs.
Classifies vehicle and destination text, applies the negotiated tariff
breakpoints and bulk-imports delivery records from spreadsheet exports.
"""

__version__ = "1.0.0"
