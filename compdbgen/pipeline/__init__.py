"""Console presentation for compdbgen runs."""
