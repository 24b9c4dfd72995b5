# src/repository/__init__.py — v1
