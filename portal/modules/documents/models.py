# Supabase table: documents, Supabase Storage bucket: documents (settings.documents_bucket)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- name: text (not null)
- type: text (not null) - MIME type or short kind (pdf, doc, image, archive)
- size: text (not null) - human readable, e.g. "2.4 MB"
- url: text (nullable) - storage location; "/documents/<name>" for metadata-only rows,
  "uploads/<uuid>_<name>" inside the Supabase bucket, or "s3://<bucket>/<key>"
- tags: text[] (default: '{}')
- is_starred: boolean (default: false)
- folder_id: text (nullable)
- modified_by: text (not null)
- last_modified: timestamp (default: now())
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
