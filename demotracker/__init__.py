"""Demo tracker: catalog of client demos and the tasks attached to them."""

__version__ = "0.1.0"
