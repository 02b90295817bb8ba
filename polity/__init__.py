"""Polity API: role-based permissions for groups, events, blogs and amendments."""
