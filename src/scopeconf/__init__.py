"""scopeconf: browse and edit a hierarchical settings store on a text console."""

__version__ = "0.1.0"
