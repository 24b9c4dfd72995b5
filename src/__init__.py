# src/__init__.py — v1
