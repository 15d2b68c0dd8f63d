"""
Git Smart - Keep a feature branch in step with the default branch.

This package stashes local changes, pulls the default branch, rebases the
current branch onto it and restores the stash, rolling back where it can
when a step fails.
"""

__version__ = "1.0.0"
