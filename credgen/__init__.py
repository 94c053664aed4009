"""credgen: random username and password generation over a small HTTP API."""

__version__ = "1.0.0"
