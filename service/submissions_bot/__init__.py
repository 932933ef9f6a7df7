"""Admin Telegram bot for browsing form submissions stored in Supabase."""

__version__ = "0.1.0"
