"""
Porirua Club Platform
Blueprint registry.
"""

from venue_desk.blueprints.health_bp import health_bp

ALL_BLUEPRINTS = (health_bp,)
