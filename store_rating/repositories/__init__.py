"""레포지토리 패키지 — 데이터베이스 쿼리 계층.

Repository package — Database query layer.
Contains one repository per entity (users, stores, ratings, activity logs).
Each repository extends BaseRepository for generic CRUD and adds
entity-specific list and aggregate queries.
"""
