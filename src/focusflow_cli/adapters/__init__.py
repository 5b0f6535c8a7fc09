"""Storage adapters implementing the timer store interface."""
