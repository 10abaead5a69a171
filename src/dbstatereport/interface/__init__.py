"""Interface layer: typer command line and output formatting."""
