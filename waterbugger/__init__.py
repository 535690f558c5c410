"""WaterBugger - a Telegram bot that nags you to stay hydrated."""
