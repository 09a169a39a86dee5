"""
Duct Quote Package

Quote engine and job intake for a duct-cleaning business.
Prices a job from square footage, HVAC system count and zipcode, with a
partner discount and an alternate Clean & Seal price.
"""

__version__ = "1.0.0"
