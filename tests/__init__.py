"""Tests for the cloud integrations."""
