"""Launchpad attendance API: club space check-in/check-out and admin console."""
