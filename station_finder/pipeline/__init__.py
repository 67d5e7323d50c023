"""Stages of the fire station search, from candidate filtering to the final ranking."""
