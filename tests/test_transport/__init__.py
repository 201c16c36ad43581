"""Tests for contractkit.transport."""
