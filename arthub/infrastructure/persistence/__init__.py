"""Persistence: SQLAlchemy engine, models, repositories, and the ledger recorder."""
