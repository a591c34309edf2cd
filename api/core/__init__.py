"""
Shared, cross-cutting code for the feedback API.

`core/` holds small building blocks used by several features
(DB wiring, env settings, logging, markup rendering). Feature SQL and
business rules live in the feature packages (`posts/`, `comments/`, `auth/`).
"""
