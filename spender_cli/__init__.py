"""Console interface for the money spender."""
