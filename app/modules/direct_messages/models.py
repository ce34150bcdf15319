# Supabase table: direct_messages

"""
Expected Supabase table structure (see supabase/migrations):

direct_messages:
- id: uuid (primary key)
- sender_id: uuid (not null)
- receiver_id: uuid (not null)
- text: text (nullable)
- code_content: text (nullable)
- code_language: text (nullable, always 'cpp' when code_content is set)
- created_at: timestamptz (default: now())

RLS:
- select: auth.uid() = sender_id or auth.uid() = receiver_id
- insert: auth.uid() = sender_id
- delete: auth.uid() = sender_id

The table is part of the supabase_realtime publication.
"""

DM_CODE_LANGUAGE = "cpp"
