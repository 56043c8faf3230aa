"""Game rules: combat, AI, inventory, targeting, turns and persistence."""
