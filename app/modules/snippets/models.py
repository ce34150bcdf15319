# Supabase table: saved_codes

"""
Expected Supabase table structure (see supabase/migrations):

saved_codes:
- id: uuid (primary key)
- user_id: uuid (not null, references auth.users.id on delete cascade)
- title: text (not null, default 'Untitled')
- code: text (not null)
- output: text (nullable) - last program output shown when the snippet was saved
- created_at: timestamptz (default: now())

RLS: select / insert / delete only where user_id = auth.uid().
"""

DEFAULT_TITLE = "Untitled"
