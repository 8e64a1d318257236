"""Core layer - configuration, parameters, execution and errors."""
