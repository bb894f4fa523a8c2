# Supabase table: tickets
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- title: text (not null)
- description: text (not null)
- status: text (not null, default: 'pending') - pending | in_progress | review | completed
- priority: text (not null) - high | medium | low
- category: text (not null)
- assignee_id: uuid (nullable, foreign key to users.id)
- reporter_id: uuid (nullable, foreign key to users.id)
- due_date: date (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Assignee and reporter are attached in service.py by fetching the referenced
users separately and matching on id.
"""
