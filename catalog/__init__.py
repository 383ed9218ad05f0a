"""
Catalog app - default reference data (metal types and seed prices).
"""
