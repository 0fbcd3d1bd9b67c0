"""
Stargazer API - Business Logic Layer

This package contains the core scoring logic for the Sky Imaging Quality
Score (SIQS), separated from CLI presentation concerns.

The API is organized into logical subpackages:
- core: Constants, settings and exceptions
- location: Weather forecasts and light pollution
- astronomy: Moon phase helpers
- siqs: Factor scoring, nighttime aggregation, caching and batch scoring
"""

# Activate deal contracts for runtime validation
import deal


deal.activate()

__all__ = [
    # Package is organized into subpackages - import directly from them:
    # from stargazer.api.siqs.calculator import ...
    # from stargazer.api.location.weather import ...
    # etc.
]
