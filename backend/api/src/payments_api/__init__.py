"""HTTP surface of the payment functions (FastAPI, wrapped for Lambda)."""
