"""eiplint — consistency linter for proposal document preambles."""

__version__ = "0.3.0"
