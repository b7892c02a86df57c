"""
Слой персистентности (SQLAlchemy).
"""
