"""Certificate and signature verification services."""
