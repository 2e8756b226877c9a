"""Install bookkeeping for Crossplug."""
