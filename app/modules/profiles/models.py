# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure (see supabase/migrations):

profiles:
- id: uuid (primary key, default gen_random_uuid())
- user_id: uuid (unique, not null, references auth.users.id on delete cascade)
- username: text (not null)
- avatar_emoji: text (not null, default '🧑‍💻')
- created_at: timestamptz (default: now())

RLS:
- select: any authenticated user
- insert / update: only the row whose user_id = auth.uid()

Note: Authentication data (password, tokens) is stored in auth.users table
managed by Supabase Auth. This table only stores display information.
"""
