"""
godotino - build orchestrator for Go-on-Arduino projects.

Translates project sources with godotino-core and compiles/uploads the
result through arduino-cli.
"""

__version__ = "0.1.0"
