"""ipstudio - rights attribution, licensing and pricing for creator assets."""

__version__ = "0.1.0"
