"""
Domain Layer

Pure business rules for image links. No framework or infrastructure imports.
"""
