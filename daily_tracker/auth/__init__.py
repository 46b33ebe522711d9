# -*- coding: utf-8 -*-
"""Local credential auth (PBKDF2 password hashes, HS256 session tokens)."""
