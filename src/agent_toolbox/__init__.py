"""Agent tools for GitHub repository health and SF 311 case analytics."""

__version__ = "0.1.0"
