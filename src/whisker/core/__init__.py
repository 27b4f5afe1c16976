"""Core engine packages: template parsing, rendering, configuration."""
