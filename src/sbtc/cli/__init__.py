"""Command-line interface for sbtc."""
