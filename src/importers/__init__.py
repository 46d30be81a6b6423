"""Input adapters turning external transaction files into domain events."""
