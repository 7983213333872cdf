"""HTTP API exposing reports to screens and export generators."""
