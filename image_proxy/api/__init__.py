"""
API Package

Contains the Flask blueprints exposed by the image proxy service.
"""
