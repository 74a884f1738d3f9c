"""Configuration, logging and starter content."""
