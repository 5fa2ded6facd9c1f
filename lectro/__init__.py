"""Lectro: vector search and RAG chat service for a personal book library."""

__version__ = "0.1.0"
