"""
Catalog API: models, variants, customers and view tracking.
"""
