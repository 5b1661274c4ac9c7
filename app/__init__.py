"""Driver locator service: KD-tree backed nearest available driver lookup."""

__all__ = []
