"""Compile, run and check C++ sources in one pass."""
