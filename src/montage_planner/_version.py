"""Version information for montage-planner package."""

__version__ = "0.2.0"
