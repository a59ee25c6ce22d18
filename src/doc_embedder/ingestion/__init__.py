"""
Ingestion — chunking, embedding, and storage of documents in the vector index.

This module turns raw ``{name: text}`` documents into passages, embeds each
passage through an embedding provider, and upserts the vectors with their
metadata into a namespaced index, pacing every provider call.
"""
