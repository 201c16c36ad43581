"""Tests for contractkit.utils."""
