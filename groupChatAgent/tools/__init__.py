"""External tools available to the agents."""
