"""KidQuest: adaptive level-progression engine for kids' learning games."""
