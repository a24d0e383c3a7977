"""HTTP API for tokenbridge."""
