"""Commands module for the compdbgen CLI."""
