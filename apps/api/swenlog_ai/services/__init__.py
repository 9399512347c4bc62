"""AI service layer and AI-backed tools."""
