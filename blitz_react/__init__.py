"""blitz-react: create a new React project with minimal setup."""

__version__ = "0.1.0"
