"""Business logic for films and songs."""
