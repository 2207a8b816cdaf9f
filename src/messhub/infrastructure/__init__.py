"""
infrastructure - Concrete implementations of domain ports.

Contains all vendor-specific code: SQLite persistence and configuration.
Depends on domain/ only (implements ports). Never imported by application/.
"""
