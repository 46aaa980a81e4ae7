"""Business logic and the realtime chat hub."""
