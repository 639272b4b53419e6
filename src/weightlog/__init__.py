"""weightlog: personal weight tracking with local storage and Airtable sync."""

__version__ = "0.1.0"
