__version__ = "0.3.0"
__schema_version__ = "1"
