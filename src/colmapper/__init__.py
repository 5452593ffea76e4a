"""colmapper - naming convention based object to column mapping."""

__version__ = "0.1.0"
