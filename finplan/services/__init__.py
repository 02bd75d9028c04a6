"""Services that coordinate the projection models."""
