"""
CafeOPS package

Minute-by-minute simulation of a small café and the rollup engine that
turns simulated ticks into daily and all-time operating metrics.  The
package separates the business clock and simulation engine (core), the
configuration and records (domain), the pricing, demand and staffing
rules, the persistence layer and the console UI into distinct
subpackages.
"""

__all__ = ["core", "domain", "data", "rules", "storage", "ui"]
