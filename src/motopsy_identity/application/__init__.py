"""Application layer: use-case services orchestrating the identity core."""
