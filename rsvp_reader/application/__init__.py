"""Application layer: configuration, controller and HTTP surface."""
