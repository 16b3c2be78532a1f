"""
Core lesson logic - independent of the web layer.
Used by the FastAPI routes and the static exporter.
"""
