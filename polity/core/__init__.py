"""Core application components.

This module provides the foundational components for the Polity API:
- Database client construction and injection via Prisma
- Application settings and configuration
"""
