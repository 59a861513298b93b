"""Card statement ingestion, categorization and monthly spending analysis."""

__version__ = "0.1.0"
