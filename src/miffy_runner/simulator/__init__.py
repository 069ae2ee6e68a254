"""Desktop simulator: pygame window over the run controller."""
