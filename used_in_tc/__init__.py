"""Find the test cases that transitively exercise a code pattern."""

__version__ = "1.0.0"
