"""HTTP front end for proof-of-thought verification."""

__version__ = "0.1.0"
