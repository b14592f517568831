"""Small numeric helpers shared by the model and the coordinate code"""


def clamp(value, lo, hi):
    """Clamp value into [lo, hi]."""
    return max(lo, min(hi, value))
