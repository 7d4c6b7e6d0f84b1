"""Configuration layer: settings, section models, discovery, and logging."""
