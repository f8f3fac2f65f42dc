# ABOUTME: readtrack - a personal reading tracker client.
# ABOUTME: Owner-scoped book collection with cover uploads over pluggable stores.

__version__ = "0.1.0"
