"""
Target language renderers.
"""
