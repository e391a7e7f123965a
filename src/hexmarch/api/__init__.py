"""HTTP surface for hexmarch campaigns."""
