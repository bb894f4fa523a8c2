# Supabase table: announcements
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- title: text (not null)
- content: text (not null)
- author: text (not null) - display name of the writer
- priority: text (default: 'medium') - high | medium | low
- is_pinned: boolean (default: false)
- created_at: timestamp (default: now())
"""
