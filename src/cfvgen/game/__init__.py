"""Game rules: cards, boards and the public betting tree."""
