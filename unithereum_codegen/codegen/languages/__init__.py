"""
Target language support for generated bindings.
"""
