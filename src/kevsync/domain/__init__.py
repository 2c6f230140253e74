"""Domain types and services for KEV policy synchronisation."""
