"""Tests for file storage."""
