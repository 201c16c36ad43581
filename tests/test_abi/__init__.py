"""Tests for contractkit.abi."""
