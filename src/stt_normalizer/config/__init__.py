"""Configuration for the STT normalizer."""
