"""Visual editor for versioned JSON publisher configurations."""

__version__ = "0.1.0"
