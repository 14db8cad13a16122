"""
Patient Dashboard - patient records with a searchable, sortable, paginated list.
"""
__version__ = "1.0.0"
