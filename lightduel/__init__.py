"""Lightduel - player vs. AI light-cycle duel on a square grid."""

__version__ = "0.1.0"
