"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Services apply validation and access policies, call repositories for
database work and leave committing to the routers.
"""
