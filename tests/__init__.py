"""App settings test suite."""
