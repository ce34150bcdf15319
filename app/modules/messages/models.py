# Supabase table: messages (group chat)

"""
Expected Supabase table structure (see supabase/migrations):

messages:
- id: uuid (primary key)
- user_id: uuid (not null, references profiles.user_id on delete cascade)
- text: text (nullable)
- code_content: text (nullable)
- code_language: text (nullable, set only when code_content is set)
- created_at: timestamptz (default: now())

RLS:
- select: any authenticated user
- insert / update / delete: only rows where user_id = auth.uid()

The table is part of the supabase_realtime publication.
"""

CODE_LANGUAGES = ("cpp", "python", "java")
DEFAULT_CODE_LANGUAGE = "cpp"
