"""HTTP routes for the peluqueria dashboard."""
