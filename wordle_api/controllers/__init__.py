"""
Controllers Package

HTTP blueprints.
"""
