"""FinSight backend: financial projection engine and its Flask API."""
