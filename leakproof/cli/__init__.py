"""Command line interface for leakproof"""
