"""AI services that sit outside the simulation core."""
