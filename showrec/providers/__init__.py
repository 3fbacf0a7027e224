"""Concrete adapters for the interfaces in ``showrec.interfaces``."""
