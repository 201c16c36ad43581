"""Tests for contractkit.deploy."""
