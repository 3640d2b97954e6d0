"""HTTP API for zap quotes and calldata."""
