"""
Core business logic for client management.

This package is framework-agnostic - it doesn't import FastAPI, boto3,
or any infrastructure concerns. The validation and storage rules can be
tested in isolation and reused behind any transport.
"""
