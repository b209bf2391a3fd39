"""Top-level package for the Fare Estimator project.

Turns an origin/destination pair into a ranked list of transport fares:
debounced place suggestions, road distance with a straight-line fallback,
and pricing over distance formulas and fixed point-to-point tables.
"""
