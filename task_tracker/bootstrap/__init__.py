"""Bootstrap wiring for Task Tracker (logging, database)."""
