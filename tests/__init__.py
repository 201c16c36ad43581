"""contractkit test suite."""
