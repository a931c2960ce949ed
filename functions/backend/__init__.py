"""
Backend package for the NutriWise API.

Provides a FastAPI application over the advisor flows, with Firestore and
Firebase Storage behind small client abstractions so tests and local runs can
use in-memory backends.
"""
