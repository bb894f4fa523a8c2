# Supabase table: users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, default: gen_random_uuid())
- name: text (not null)
- email: text (unique, not null)
- auth_id: uuid (nullable, references auth.users.id)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Rows are also created implicitly when a ticket names an assignee or reporter
that does not exist yet; those rows carry a placeholder email.
"""
