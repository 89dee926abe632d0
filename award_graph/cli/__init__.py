"""Command-line interface for the award graph pipeline."""
