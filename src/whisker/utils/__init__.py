"""Shared utilities for Whisker."""
