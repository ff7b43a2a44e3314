"""Search aspects and their execution strategies."""
