"""Feature logic. Each module talks to Supabase through ``supabase_service``."""
