"""Configuration: JSON config files, env vars, and CLI flags."""
