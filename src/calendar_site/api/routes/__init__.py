"""Webhook API routes."""
