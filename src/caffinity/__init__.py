"""Caffinity — coffee-shop ordering backend built on Protean."""
