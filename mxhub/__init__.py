"""MX Hub: a personal motocross companion API backed by Supabase."""

__version__ = "1.0.0"
