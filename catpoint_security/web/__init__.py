"""Web interface for the catpoint security system."""
