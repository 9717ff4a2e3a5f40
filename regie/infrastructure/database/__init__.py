"""SQLModel persistence adapter."""
