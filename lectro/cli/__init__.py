"""Command-line tools for managing the Lectro vector store."""
