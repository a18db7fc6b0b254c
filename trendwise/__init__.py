"""Command-line wrappers for the TrendWise trend engine."""
