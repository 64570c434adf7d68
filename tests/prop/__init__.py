"""
Property-based tests for the bytecode encoder and decoder.

This package hosts Hypothesis strategies for well-formed trees and the test
entrypoints for round-trip fidelity and decoder totality on hostile input.
"""
