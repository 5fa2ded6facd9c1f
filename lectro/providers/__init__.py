"""Concrete adapters for Lectro's external collaborators (see lectro.interfaces)."""
