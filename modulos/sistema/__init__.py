"""Health check e diagnóstico do ambiente."""
